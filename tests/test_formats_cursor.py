"""Tests for the Cursor adapter."""

from promptpack import CanonicalPackage
from promptpack import Format
from promptpack import PackageAttributes
from promptpack import Subtype
from promptpack import from_cursor
from promptpack import to_cursor

METADATA = {"id": "ts-rules", "name": "ts-rules", "version": "1.0.0", "author": "test", "tags": []}


def test_from_cursor_basic():
    """description, globs and alwaysApply map onto attributes."""
    content = '---\ndescription: TypeScript rules\nglobs: ["**/*.ts"]\nalwaysApply: false\n---\n\n# TS\n\nUse strict mode.\n'

    pkg = from_cursor(content, METADATA)

    assert pkg.format is Format.CURSOR
    assert pkg.attributes.description == "TypeScript rules"
    assert pkg.attributes.globs == ["**/*.ts"]
    assert pkg.attributes.always_apply is False
    assert pkg.title == "TS"
    assert pkg.body == "Use strict mode."


def test_from_cursor_comma_separated_globs():
    """A comma-separated globs string is split."""
    content = "---\nglobs: src/**/*.ts, src/**/*.tsx\n---\n\nBody"

    pkg = from_cursor(content, METADATA)

    assert pkg.attributes.globs == ["src/**/*.ts", "src/**/*.tsx"]


def test_from_cursor_string_always_apply_is_coerced():
    """Quoted booleans are accepted, other shapes stay in extra."""
    assert from_cursor("---\nalwaysApply: 'true'\n---\nBody", METADATA).attributes.always_apply is True

    pkg = from_cursor("---\nalwaysApply: sometimes\n---\nBody", METADATA)
    assert pkg.attributes.always_apply is None
    assert pkg.extra == {"alwaysApply": "sometimes"}


def test_to_cursor_emits_only_cursor_fields():
    """Tools and model are never written to Cursor output."""
    pkg = CanonicalPackage(
        id="x",
        name="x",
        body="Body",
        attributes=PackageAttributes(
            description="Desc", globs=["**/*.ts"], always_apply=True, allowed_tools=["Read"], model="opus"
        ),
    )

    result = to_cursor(pkg)

    assert result.content == "---\ndescription: Desc\nglobs: ['**/*.ts']\nalwaysApply: true\n---\n\nBody\n"
    assert "allowedTools" not in result.content
    assert "Read" not in result.content
    assert result.lossy is True
    assert result.warnings == ["cursor cannot represent: allowedTools, model"]


def test_to_cursor_empty_package_has_envelope():
    """A package without content still yields a frontmatter envelope."""
    result = to_cursor(CanonicalPackage(id="x", name="x"))

    assert result.content == "---\n---\n"


def test_to_cursor_skill_is_substituted_with_rule():
    """Cursor has no skills; the substitution is recorded, never raised."""
    pkg = CanonicalPackage(id="pdf", name="pdf", subtype="skill", body="Handle PDFs.")

    result = to_cursor(pkg)

    assert result.subtype is Subtype.RULE
    assert result.substitution is not None
    assert str(result.substitution) == "cursor has no 'skill' subtype; using 'rule' instead"
    assert str(result.substitution) in result.warnings
    assert result.lossy is False


def test_cursor_idempotence():
    """Serializing, parsing and serializing again yields identical content."""
    pkg = CanonicalPackage(
        id="ts-rules",
        name="ts-rules",
        title="TypeScript",
        body="Prefer `unknown` over `any`.\n\n---\n\n- Use strict mode",
        attributes=PackageAttributes(description="TS rules: strict", globs=["**/*.ts", "**/*.tsx"], always_apply=False),
    )

    first = to_cursor(pkg).content
    second = to_cursor(from_cursor(first, METADATA)).content

    assert second == first


def test_cursor_extra_round_trip():
    """Unknown Cursor keys survive a Cursor round trip."""
    content = "---\ndescription: Rules\npriority: 3\n---\n\nBody\n"

    assert to_cursor(from_cursor(content, METADATA)).content == content
