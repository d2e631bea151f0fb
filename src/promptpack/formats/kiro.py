"""Kiro adapter - steering files with an ``inclusion`` frontmatter header."""

from typing import Any

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import Inclusion
from ..schema import SeedMetadata
from ..utils import coerce_str
from ..utils import split_list
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import coerce_options
from ._base import frontmatter_document
from ._base import make_result
from ._base import parse_frontmatter_document
from ._base import with_extra

DEFAULT_INCLUSION = Inclusion.ALWAYS


def _coerce_pattern(value: Any) -> list[str] | None:
    # A single pattern string is one glob, even if it contains commas
    if isinstance(value, str):
        return [value.strip()] if value.strip() else None
    return split_list(value)


def _render_pattern(globs: list[str]) -> str | list[str]:
    return globs[0] if len(globs) == 1 else list(globs)


KIRO_FIELDS = (
    FieldSpec("inclusion", "inclusion", coerce_str),
    FieldSpec("fileMatchPattern", "globs", _coerce_pattern, _render_pattern),
)

REPRESENTED = ("inclusion", "globs")


def from_kiro(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """Parse a Kiro steering file.

    Unknown inclusion modes are kept as-is; validate() reports them.
    """
    return parse_frontmatter_document(content, seed, format=Format.KIRO, fields=KIRO_FIELDS)


def to_kiro(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as a Kiro steering file.

    Inclusion precedence: ``options.kiro_config.inclusion``, the package's
    inclusion attribute, then ``always``. The file match pattern comes from
    ``options.kiro_config.file_match_pattern`` or the package globs.

    Example:
        >>> to_kiro(pkg, {"kiroConfig": {"inclusion": "manual"}}).content.splitlines()[1]
        'inclusion: manual'
    """
    config = coerce_options(options).kiro_config
    resolution = resolve_subtype(Format.KIRO, pkg.subtype)

    inclusion = (config.inclusion if config else None) or pkg.attributes.inclusion or DEFAULT_INCLUSION
    header: dict[str, Any] = {"inclusion": str(inclusion)}

    pattern: str | list[str] | None = config.file_match_pattern if config else None
    if not pattern and pkg.attributes.globs:
        pattern = _render_pattern(pkg.attributes.globs)
    if pattern:
        header["fileMatchPattern"] = pattern

    warnings = []
    if header["inclusion"] == Inclusion.FILE_MATCH and not pattern:
        warnings.append("fileMatch inclusion mode requires fileMatchPattern")

    content = frontmatter_document(pkg, with_extra(header, pkg, Format.KIRO))
    return make_result(pkg, Format.KIRO, content, resolution, REPRESENTED, warnings)


ADAPTER = FormatAdapter(
    format=Format.KIRO,
    parse=from_kiro,
    serialize=to_kiro,
    fields=KIRO_FIELDS,
    envelope="frontmatter",
)
