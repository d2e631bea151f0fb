"""Tests for the agents.md adapter."""

import pytest
from promptpack import CanonicalPackage
from promptpack import EmptyDocumentError
from promptpack import PackageAttributes
from promptpack import Subtype
from promptpack import from_agents_md
from promptpack import to_agents_md


def test_from_agents_md_metadata_from_seed():
    """Everything except title and body comes from the seed."""
    seed = {"id": "repo-guide", "name": "Repo Guide", "version": "2.0.0", "author": "octo", "tags": ["docs"]}

    pkg = from_agents_md("# Repo Guide\n\n## Setup\n\nRun make.\n", seed)

    assert pkg.id == "repo-guide"
    assert pkg.name == "Repo Guide"
    assert pkg.version == "2.0.0"
    assert pkg.author == "octo"
    assert pkg.tags == ["docs"]
    assert pkg.title == "Repo Guide"
    assert pkg.body == "## Setup\n\nRun make."
    assert pkg.subtype == Subtype.RULE


def test_from_agents_md_frontmatter_like_text_is_body():
    """agents.md has no envelope, so nothing is stripped."""
    pkg = from_agents_md("Intro\n\n---\n\nMore", {"id": "x"})

    assert pkg.body == "Intro\n\n---\n\nMore"


def test_from_agents_md_empty():
    """Blank content raises EmptyDocumentError."""
    with pytest.raises(EmptyDocumentError):
        from_agents_md("\n\n", {"id": "x"})


def test_to_agents_md_plain_markdown():
    """Output is the markdown only; attributes are reported as dropped."""
    pkg = CanonicalPackage(
        id="x", name="x", title="Guide", body="Run make.", attributes=PackageAttributes(description="D")
    )

    result = to_agents_md(pkg)

    assert result.content == "# Guide\n\nRun make.\n"
    assert result.lossy is True


def test_to_agents_md_empty_package():
    """An empty package still produces content, never None."""
    assert to_agents_md(CanonicalPackage(id="x", name="x")).content == "\n"
