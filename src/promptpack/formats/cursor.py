"""Cursor adapter - ``.mdc`` rules with description/globs/alwaysApply frontmatter."""

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
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

CURSOR_FIELDS = (
    FieldSpec("description", "description", coerce_str),
    FieldSpec("globs", "globs", split_list),
    FieldSpec("alwaysApply", "always_apply", coerce_bool),
)

REPRESENTED = ("description", "globs", "always_apply")


def from_cursor(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """Parse a Cursor rule. ``globs`` may be a list or a comma-separated string."""
    return parse_frontmatter_document(content, seed, format=Format.CURSOR, fields=CURSOR_FIELDS)


def to_cursor(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as a Cursor rule.

    Only description, globs and alwaysApply are written; tools and model
    hints have no Cursor equivalent and are reported as dropped.
    """
    resolution = resolve_subtype(Format.CURSOR, pkg.subtype)
    header = with_extra(render_fields(pkg, CURSOR_FIELDS), pkg, Format.CURSOR)
    content = frontmatter_document(pkg, header)
    return make_result(pkg, Format.CURSOR, content, resolution, REPRESENTED)


ADAPTER = FormatAdapter(
    format=Format.CURSOR,
    parse=from_cursor,
    serialize=to_cursor,
    fields=CURSOR_FIELDS,
    envelope="frontmatter",
)
