"""Tests for the GitHub Copilot adapter."""

from promptpack import CanonicalPackage
from promptpack import PackageAttributes
from promptpack import Subtype
from promptpack import from_copilot
from promptpack import to_copilot

METADATA = {"id": "react", "name": "react"}


def test_from_copilot_plain_instructions():
    """Repository-wide instructions are plain markdown rules."""
    pkg = from_copilot("# Project Instructions\n\nUse pnpm.\n", METADATA)

    assert pkg.subtype == Subtype.RULE
    assert pkg.title == "Project Instructions"
    assert pkg.attributes.globs is None


def test_from_copilot_apply_to():
    """applyTo maps onto globs, split on commas."""
    pkg = from_copilot('---\napplyTo: "src/**/*.ts,src/**/*.tsx"\n---\n\n# React\n', METADATA)

    assert pkg.attributes.globs == ["src/**/*.ts", "src/**/*.tsx"]
    assert pkg.subtype == Subtype.RULE


def test_from_copilot_chatmode_detection():
    """tools without applyTo marks a chat mode."""
    content = "---\ndescription: Plan features\ntools: ['codebase', 'search']\nmodel: gpt-4o\n---\n\nPlan first."

    pkg = from_copilot(content, METADATA)

    assert pkg.subtype == Subtype.CHATMODE
    assert pkg.attributes.allowed_tools == ["codebase", "search"]
    assert pkg.attributes.model == "gpt-4o"


def test_from_copilot_prompt_from_seed():
    """Prompt files are identified by the caller."""
    pkg = from_copilot("---\ndescription: Generate tests\n---\n\nWrite tests.", {**METADATA, "subtype": "prompt"})

    assert pkg.subtype == Subtype.PROMPT


def test_to_copilot_plain_without_globs():
    """No header is written for repository-wide instructions."""
    pkg = CanonicalPackage(id="x", name="x", title="Instructions", body="Use pnpm.")

    assert to_copilot(pkg).content == "# Instructions\n\nUse pnpm.\n"


def test_to_copilot_apply_to_from_globs():
    """Globs become a comma-joined applyTo header."""
    pkg = CanonicalPackage(id="x", name="x", body="B", attributes=PackageAttributes(globs=["**/*.ts", "**/*.tsx"]))

    assert to_copilot(pkg).content.splitlines()[1] == "applyTo: '**/*.ts,**/*.tsx'"


def test_to_copilot_apply_to_option_wins():
    """copilotConfig.applyTo overrides the package globs."""
    pkg = CanonicalPackage(id="x", name="x", body="B", attributes=PackageAttributes(globs=["**/*.ts"]))

    result = to_copilot(pkg, {"copilotConfig": {"applyTo": "src/**"}})

    assert result.content.splitlines()[1] == "applyTo: src/**"


def test_to_copilot_agent_becomes_chatmode():
    """Agents are written as chat modes with tools and model."""
    pkg = CanonicalPackage(
        id="x",
        name="x",
        subtype="agent",
        body="Plan first.",
        attributes=PackageAttributes(description="Planner", allowed_tools=["search"], model="gpt-4o", globs=["*"]),
    )

    result = to_copilot(pkg)

    assert result.subtype is Subtype.CHATMODE
    assert result.content == "---\ndescription: Planner\ntools: [search]\nmodel: gpt-4o\n---\n\nPlan first.\n"
    assert result.lossy is True
    assert "copilot cannot represent: globs" in result.warnings


def test_copilot_chatmode_round_trip():
    """Chat mode attributes survive a Copilot round trip."""
    pkg = CanonicalPackage(
        id="x",
        name="x",
        subtype="chatmode",
        title="Planner",
        body="Plan first.",
        attributes=PackageAttributes(description="Planner", allowed_tools=["search", "codebase"], model="gpt-4o"),
    )

    parsed = from_copilot(to_copilot(pkg).content, METADATA)

    assert parsed.subtype == Subtype.CHATMODE
    assert parsed.title == "Planner"
    assert parsed.body == "Plan first."
    assert parsed.attributes.allowed_tools == ["search", "codebase"]
    assert parsed.attributes.model == "gpt-4o"
    assert parsed.attributes.description == "Planner"


def test_copilot_chatmode_without_tools_round_trip():
    """A chat mode with only a description keeps its subtype through Copilot."""
    pkg = CanonicalPackage(
        id="x",
        name="x",
        subtype="chatmode",
        body="Plan first.",
        attributes=PackageAttributes(description="Planner"),
    )

    result = to_copilot(pkg)
    parsed = from_copilot(result.content, METADATA)

    assert result.content == "---\ndescription: Planner\nmode: agent\n---\n\nPlan first.\n"
    assert parsed.subtype == Subtype.CHATMODE
    assert parsed.attributes.description == "Planner"
