"""Windsurf adapter - plain markdown rules and workflows, optional description header."""

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..utils import coerce_str
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import frontmatter_document
from ._base import make_result
from ._base import parse_frontmatter_document
from ._base import render_fields
from ._base import with_extra

# Windsurf truncates rule files beyond this many characters
WINDSURF_CHARACTER_LIMIT = 12_000

WINDSURF_FIELDS = (FieldSpec("description", "description", coerce_str),)

REPRESENTED = ("description",)


def from_windsurf(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    return parse_frontmatter_document(content, seed, format=Format.WINDSURF, fields=WINDSURF_FIELDS)


def to_windsurf(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """Serialize a package as a Windsurf rule or workflow.

    The header is written only when there is a description or origin extras.
    """
    resolution = resolve_subtype(Format.WINDSURF, pkg.subtype)
    header = with_extra(render_fields(pkg, WINDSURF_FIELDS), pkg, Format.WINDSURF)
    content = frontmatter_document(pkg, header or None)

    warnings = []
    if len(content) > WINDSURF_CHARACTER_LIMIT:
        warnings.append(
            f"Content is {len(content)} characters; Windsurf only reads the first {WINDSURF_CHARACTER_LIMIT}"
        )
    return make_result(pkg, Format.WINDSURF, content, resolution, REPRESENTED, warnings)


ADAPTER = FormatAdapter(
    format=Format.WINDSURF,
    parse=from_windsurf,
    serialize=to_windsurf,
    fields=WINDSURF_FIELDS,
    envelope="optional-frontmatter",
)
