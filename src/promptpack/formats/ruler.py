"""Ruler adapter - markdown with package metadata in leading HTML comments.

Ruler files never carry YAML frontmatter. Metadata lives in comment lines::

    <!-- Package: test-agent -->
    <!-- Author: Unknown -->
    <!-- Description: Test agent for conversion -->

A body line equal to ``---`` (a markdown thematic break) is written as
``--- `` so the output never contains a frontmatter delimiter; the trailing
space is removed again when parsing.
"""

import re
from typing import Any

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..utils import coerce_str
from ..utils import ensure_content
from ..utils import finish_document
from ..utils import join_title
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import build_package
from ._base import coerce_seed
from ._base import detect_subtype
from ._base import make_result
from ._base import origin_extra
from ._base import read_fields

UNKNOWN_AUTHOR = "Unknown"

_COMMENT_LINE = re.compile(r"^<!--\s*([A-Za-z][\w .-]*?)\s*:(.*?)-->\s*$")
_ESCAPED_DELIMITER = "--- "


def _coerce_author(value: Any) -> str | None:
    author = coerce_str(value)
    if not author or author.lower() == UNKNOWN_AUTHOR.lower():
        return None
    return author


def _coerce_text(value: Any) -> str | None:
    return coerce_str(value) or None


RULER_FIELDS = (
    FieldSpec("package", "name", _coerce_text),
    FieldSpec("author", "author", _coerce_author),
    FieldSpec("description", "description", _coerce_text),
)

REPRESENTED = ("description",)


def _comment_value(value: Any) -> str:
    text = " ".join(str(value).split())
    return text.replace("-->", "--&gt;")


def _read_comment_value(value: str) -> str:
    return value.strip().replace("--&gt;", "-->")


def from_ruler(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """
    Parse a Ruler markdown file.

    The contiguous block of ``<!-- Key: value -->`` lines at the top is
    metadata (keys are matched case-insensitively); the first other line,
    blank or not, ends it. ``Package`` names the package, ``Author: Unknown``
    means no author. Other keys are kept in extra under their original
    spelling.

    Raises:
        EmptyDocumentError: If content is blank

    Example:
        >>> pkg = from_ruler("<!-- Package: test-agent -->\\n\\n# Test Agent\\n")
        >>> pkg.name, pkg.title
        ('test-agent', 'Test Agent')
    """
    text = ensure_content(content, Format.RULER.value)
    lines = text.split("\n")

    header: dict[str, str] = {}
    originals: dict[str, str] = {}
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    # The header is the contiguous comment block; the first other line ends it
    while index < len(lines):
        match = _COMMENT_LINE.match(lines[index].strip())
        if not match:
            break
        key = match.group(1)
        header[key.lower()] = _read_comment_value(match.group(2))
        originals[key.lower()] = key
        index += 1

    values, extra = read_fields(header, RULER_FIELDS)
    # Empty values and "Author: Unknown" mean absent, they are not extras
    known = {spec.native for spec in RULER_FIELDS}
    extra = {originals[key]: value for key, value in extra.items() if key not in known}

    body = "\n".join(
        "---" if line == _ESCAPED_DELIMITER else line for line in lines[index:]
    )
    seed = coerce_seed(seed)
    return build_package(
        format=Format.RULER,
        seed=seed,
        subtype=detect_subtype({}, seed),
        body=body,
        values=values,
        extra=extra,
    )


def to_ruler(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as Ruler markdown.

    The first three lines are always the Package, Author and Description
    comments, followed by origin extras as further comments, a blank line
    and the markdown. Never emits a line equal to ``---``.

    Comment values hold a single line, so a description with line breaks or
    repeated whitespace is collapsed and reported in the warnings.
    """
    resolution = resolve_subtype(Format.RULER, pkg.subtype)

    header_lines = [
        f"<!-- Package: {_comment_value(pkg.name)} -->",
        f"<!-- Author: {_comment_value(pkg.author or UNKNOWN_AUTHOR)} -->",
        _comment_line("Description", pkg.description),
    ]
    for key, value in origin_extra(pkg, Format.RULER).items():
        header_lines.append(_comment_line(key, value))

    markdown = "\n".join(
        _ESCAPED_DELIMITER if line == "---" else line
        for line in join_title(pkg.title, pkg.body).split("\n")
    )
    content = finish_document("\n".join(header_lines), markdown)

    warnings = []
    description = pkg.description
    if description and " ".join(description.split()) != description:
        warnings.append("Ruler comments hold a single line; description whitespace was collapsed")
    return make_result(pkg, Format.RULER, content, resolution, REPRESENTED, warnings, lossy=bool(warnings))


def _comment_line(key: str, value: Any) -> str:
    text = _comment_value(value) if value is not None else ""
    return f"<!-- {key}: {text} -->" if text else f"<!-- {key}: -->"


ADAPTER = FormatAdapter(
    format=Format.RULER,
    parse=from_ruler,
    serialize=to_ruler,
    fields=RULER_FIELDS,
    envelope="html-comments",
)
