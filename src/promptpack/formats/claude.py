"""Claude Code adapter - YAML frontmatter markdown for rules, agents, skills and commands."""

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..schema import Subtype
from ..utils import coerce_bool
from ..utils import coerce_str
from ..utils import split_list
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import frontmatter_document
from ._base import make_result
from ._base import parse_frontmatter_document
from ._base import render_fields
from ._base import with_extra


def _join_tools(tools: list[str]) -> str:
    return ", ".join(tools)


CLAUDE_FIELDS = (
    FieldSpec("name", "name", coerce_str),
    FieldSpec("description", "description", coerce_str),
    FieldSpec("allowed-tools", "allowed_tools", split_list, _join_tools, emit=False),
    FieldSpec("tools", "allowed_tools", split_list, _join_tools, emit=False),
    FieldSpec("model", "model", coerce_str),
    FieldSpec("paths", "globs", split_list),
    FieldSpec("alwaysApply", "always_apply", coerce_bool),
)

REPRESENTED = ("description", "allowed_tools", "model", "globs", "always_apply")


def from_claude(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """
    Parse a Claude Code markdown document.

    The frontmatter header is optional. ``allowed-tools`` and ``tools`` both
    map to allowedTools and accept a comma-separated string or a list.

    Raises:
        EmptyDocumentError: If content is blank
        MalformedFrontmatterError: If the header is unterminated or invalid

    Example:
        >>> pkg = from_claude("---\\nname: reviewer\\n---\\n\\n# Reviewer\\n", {"id": "reviewer"})
        >>> pkg.name, pkg.title
        ('reviewer', 'Reviewer')
    """
    return parse_frontmatter_document(content, seed, format=Format.CLAUDE, fields=CLAUDE_FIELDS)


def to_claude(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as Claude Code markdown.

    Always writes a frontmatter header starting with ``name``. Agents list
    their tools under ``tools``, every other subtype under ``allowed-tools``.
    """
    resolution = resolve_subtype(Format.CLAUDE, pkg.subtype)

    header = {"name": pkg.name}
    if pkg.attributes.description:
        header["description"] = pkg.attributes.description
    if pkg.attributes.allowed_tools:
        tools_key = "tools" if resolution.subtype is Subtype.AGENT else "allowed-tools"
        header[tools_key] = _join_tools(pkg.attributes.allowed_tools)
    header.update(render_fields(pkg, CLAUDE_FIELDS))

    content = frontmatter_document(pkg, with_extra(header, pkg, Format.CLAUDE))
    return make_result(pkg, Format.CLAUDE, content, resolution, REPRESENTED)


ADAPTER = FormatAdapter(
    format=Format.CLAUDE,
    parse=from_claude,
    serialize=to_claude,
    fields=CLAUDE_FIELDS,
    envelope="frontmatter",
)
