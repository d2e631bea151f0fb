"""Tests for the format dispatch table."""

import logging

import pytest
from promptpack import ADAPTERS
from promptpack import Format
from promptpack import UnsupportedFormatError
from promptpack import convert
from promptpack import from_agents_md
from promptpack import get_adapter
from promptpack import parse_document
from promptpack import serialize_package
from promptpack import to_agents_md


def test_every_format_has_an_adapter():
    """The dispatch table holds one record per format."""
    assert set(ADAPTERS) == set(Format)
    for format, adapter in ADAPTERS.items():
        assert adapter.format is format
        assert callable(adapter.parse)
        assert callable(adapter.serialize)


def test_get_adapter_accepts_aliases():
    """agents.md can be addressed by several spellings."""
    for alias in ("agents.md", "AGENTS.md", "agentsMd", "agents-md", "agents_md"):
        adapter = get_adapter(alias)
        assert adapter.parse is from_agents_md
        assert adapter.serialize is to_agents_md


def test_unknown_format_raises():
    """Unknown identifiers raise UnsupportedFormatError at dispatch time."""
    with pytest.raises(UnsupportedFormatError):
        get_adapter("vim")
    with pytest.raises(UnsupportedFormatError):
        convert("# Doc", "claude", "vim")
    with pytest.raises(UnsupportedFormatError):
        parse_document("vim", "# Doc")


def test_unknown_target_checked_before_parsing():
    """A bad target fails even when the source would not parse."""
    with pytest.raises(UnsupportedFormatError):
        convert("", "claude", "vim")


def test_parse_and_serialize_document():
    """parse_document and serialize_package dispatch by identifier."""
    pkg = parse_document("cursor", "---\ndescription: D\n---\n\n# Rules\n", {"id": "rules"})

    result = serialize_package("windsurf", pkg)

    assert result.format is Format.WINDSURF
    assert result.content == "---\ndescription: D\n---\n\n# Rules\n"


def test_convert_logs_substitution(caplog):
    """Dispatch logs substitutions at debug level."""
    with caplog.at_level(logging.DEBUG, logger="promptpack.formats"):
        convert("# Skill", "claude", "cursor", {"id": "s", "subtype": "skill"})

    assert any("Subtype substituted" in record.message for record in caplog.records)
