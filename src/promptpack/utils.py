"""Markdown and frontmatter primitives shared by every format adapter.

Per DRY: Central helpers eliminate duplicated envelope handling across adapters.
Per RUTHLESS_SIMPLICITY: YAML via PyYAML, everything else is line handling.
"""

import re
from typing import Any

import yaml

from .exceptions import EmptyDocumentError
from .exceptions import MalformedFrontmatterError

FRONTMATTER_DELIMITER = "---"

_DELIMITER_LINE = re.compile(r"^---[ \t]*$")
_H1_LINE = re.compile(r"^#[ \t]+(.+?)[ \t]*$")
_LEADING_BLANK_LINES = re.compile(r"^(?:[ \t]*\r?\n)+")
_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9._-]+")


def strip_bom(content: str) -> str:
    return content[1:] if content.startswith("\ufeff") else content


def ensure_content(content: str | None, format_name: str) -> str:
    """Return content without BOM and with normalized newlines.

    Raises:
        EmptyDocumentError: If content is missing or whitespace only
    """
    text = strip_bom(content or "")
    if not text.strip():
        raise EmptyDocumentError(
            f"Cannot parse empty {format_name} document",
            context={"format": format_name},
        )
    return text.replace("\r\n", "\n")


def normalize_body(body: str) -> str:
    """Drop leading blank lines and trailing whitespace, keep everything else verbatim."""
    return _LEADING_BLANK_LINES.sub("", body).rstrip()


def split_title(markdown: str) -> tuple[str | None, str]:
    """Split a leading level-1 heading from the rest of a markdown document.

    The heading only counts as the title when it is the first non-blank line;
    a heading preceded by other content stays in the body so that joining
    title and body reproduces the document.

    Returns:
        (title or None, remaining body)

    Example:
        >>> split_title("# Test Agent\\n\\nYou are a test agent.")
        ('Test Agent', 'You are a test agent.')
    """
    text = normalize_body(markdown)
    if not text:
        return None, ""
    first, _, rest = text.partition("\n")
    match = _H1_LINE.match(first)
    if not match:
        return None, text
    return match.group(1), normalize_body(rest)


def join_title(title: str | None, body: str) -> str:
    """Inverse of split_title."""
    parts = []
    if title:
        parts.append(f"# {title}")
    if body:
        parts.append(body)
    return "\n\n".join(parts)


def split_frontmatter(content: str, format_name: str) -> tuple[dict[str, Any], str, bool]:
    """
    Split a ``---`` delimited YAML block from the start of a document.

    Args:
        content: Document text (BOM already stripped)
        format_name: Format identifier, used in error context

    Returns:
        (frontmatter mapping, remaining body, whether a block was present)

    Raises:
        MalformedFrontmatterError: If the block is unterminated, is not valid
            YAML, or does not hold a mapping
    """
    lines = content.split("\n")
    if not lines or not _DELIMITER_LINE.match(lines[0]):
        return {}, content, False

    for index in range(1, len(lines)):
        if _DELIMITER_LINE.match(lines[index]):
            closing = index
            break
    else:
        raise MalformedFrontmatterError(
            f"{format_name} frontmatter is missing its closing '---' line",
            context={"format": format_name},
        )

    block = "\n".join(lines[1:closing])
    try:
        data = yaml.safe_load(block) if block.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedFrontmatterError(
            f"{format_name} frontmatter is not valid YAML: {e}",
            context={"format": format_name},
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontmatterError(
            f"{format_name} frontmatter must be a mapping, got {type(data).__name__}",
            context={"format": format_name},
        )

    body = "\n".join(lines[closing + 1 :])
    return {str(k): v for k, v in data.items()}, body, True


class _FrontmatterDumper(yaml.SafeDumper):
    """Block-style mappings with flat lists written inline."""


def _represent_inline_list(dumper: yaml.SafeDumper, data: list) -> yaml.SequenceNode:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)


_FrontmatterDumper.add_representer(list, _represent_inline_list)


def build_frontmatter(fields: dict[str, Any]) -> str:
    """Render a mapping as a ``---`` delimited YAML block (key order preserved).

    Every key gets its own ``key: value`` line; lists are written inline
    (``globs: ['**/*.ts']``). Long strings are never folded.
    """
    if not fields:
        return f"{FRONTMATTER_DELIMITER}\n{FRONTMATTER_DELIMITER}"
    rendered = yaml.dump(
        fields,
        Dumper=_FrontmatterDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=float("inf"),
    )
    return f"{FRONTMATTER_DELIMITER}\n{rendered.rstrip()}\n{FRONTMATTER_DELIMITER}"


def finish_document(*parts: str) -> str:
    """Join non-empty document parts with blank lines and end with one newline."""
    text = "\n\n".join(p for p in parts if p)
    return f"{text}\n" if text else ""


def split_list(value: Any) -> list[str] | None:
    """Coerce a comma-separated string or a list of scalars into a list of strings.

    Returns:
        List of non-empty trimmed strings, or None if the value has another shape
    """
    if isinstance(value, str):
        return [item.strip() for item in _split_commas(value) if item.strip()]
    if isinstance(value, list) and all(isinstance(v, (str, int, float)) and not isinstance(v, bool) for v in value):
        return [str(v).strip() for v in value if str(v).strip()]
    return None


def _split_commas(value: str) -> list[str]:
    # Commas inside glob braces ("*.{ts,tsx}") do not separate items
    items: list[str] = []
    depth = 0
    current: list[str] = []
    for char in value:
        if char == "{":
            depth += 1
        elif char == "}" and depth:
            depth -= 1
        elif char == "," and not depth:
            items.append("".join(current))
            current = []
            continue
        current.append(char)
    items.append("".join(current))
    return items


def coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def coerce_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def sanitize_name(name: str, default: str = "package") -> str:
    """Lower-case a package name and make it safe to use as a file name.

    Examples:
        >>> sanitize_name("My Rules")
        'my-rules'
        >>> sanitize_name("@org/react-rules")
        'org-react-rules'
    """
    safe = _UNSAFE_NAME_CHARS.sub("-", name.strip().lower())
    safe = re.sub(r"-{2,}", "-", safe).strip("-.")
    return safe or default
