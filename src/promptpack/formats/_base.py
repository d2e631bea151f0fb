"""Shared adapter mechanism - field tables, subtype markers, conversion results.

Per DRY: Every format adapter reads and writes its envelope through the same
field-table helpers; only the tables and the envelope differ per format.
Per KERNEL_PHILOSOPHY: Adapters are pure functions of their inputs.
"""

from collections.abc import Callable
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from pydantic.alias_generators import to_camel

from ..exceptions import SubtypeSubstitutedWarning
from ..resolver import SubtypeResolution
from ..schema import CanonicalPackage
from ..schema import DEFAULT_SUBTYPE
from ..schema import Format
from ..schema import FormatOptions
from ..schema import PackageAttributes
from ..schema import SeedMetadata
from ..schema import Subtype
from ..schema import coerce_subtype
from ..utils import build_frontmatter
from ..utils import ensure_content
from ..utils import finish_document
from ..utils import join_title
from ..utils import sanitize_name
from ..utils import split_frontmatter

DEFAULT_PACKAGE_NAME = "converted-package"

# Frontmatter keys that declare a subtype explicitly; the first recognizable one wins
SUBTYPE_MARKERS = ("subtype", "type", "agentType", "skillType", "commandType")

# Canonical attributes in the order warnings report them
ATTRIBUTE_NAMES = ("description", "globs", "always_apply", "allowed_tools", "model", "inclusion")

# Package-level fields a field table may fill instead of an attribute
PACKAGE_FIELDS = ("name", "author")

# Conversion quality starts at 100 and loses points for everything the target could not carry
QUALITY_MAX = 100
QUALITY_PENALTY_SUBSTITUTION = 10
QUALITY_PENALTY_LOST_INVOCATION = 20
QUALITY_PENALTY_DROPPED_ATTRIBUTE = 10
QUALITY_PENALTY_WARNING = 5

# Subtypes invoked on demand rather than applied passively
INVOKABLE_SUBTYPES = frozenset({Subtype.SLASH_COMMAND, Subtype.PROMPT, Subtype.WORKFLOW})


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FieldSpec:
    """One row of a format's field table.

    Attributes:
        native: Key as written in the format's envelope
        attribute: PackageAttributes field (snake_case) or a package field
            (``name``/``author``) the value maps to
        coerce: Converts the native value to the canonical type, or returns
            None when the shape does not fit (the value then stays in extra)
        render: Converts the canonical value back to the native shape
        emit: Whether the serializer writes this row (aliases are parse-only)
    """

    native: str
    attribute: str
    coerce: Callable[[Any], Any]
    render: Callable[[Any], Any] = _identity
    emit: bool = True


@dataclass(frozen=True)
class ConversionResult:
    """Serializer output plus everything the caller should know about it."""

    content: str
    format: Format
    subtype: Subtype
    substitution: SubtypeSubstitutedWarning | None = None
    warnings: list[str] = field(default_factory=list)
    lossy: bool = False
    quality_score: int = QUALITY_MAX


@dataclass(frozen=True)
class FormatAdapter:
    """Parser/serializer pair for one on-disk format.

    The dispatch table in ``promptpack.formats`` holds one record per format.
    """

    format: Format
    parse: Callable[[str, SeedMetadata | dict | None], CanonicalPackage]
    serialize: Callable[..., ConversionResult]
    fields: tuple[FieldSpec, ...]
    envelope: str


def coerce_seed(seed: SeedMetadata | dict | None) -> SeedMetadata:
    if seed is None:
        return SeedMetadata()
    if isinstance(seed, SeedMetadata):
        return seed
    return SeedMetadata.model_validate(seed)


def coerce_options(options: FormatOptions | dict | None) -> FormatOptions:
    if options is None:
        return FormatOptions()
    if isinstance(options, FormatOptions):
        return options
    return FormatOptions.model_validate(options)


def read_fields(
    meta: dict[str, Any],
    specs: Iterable[FieldSpec],
    reserved: Iterable[str] = (),
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Map native envelope keys onto canonical fields using a field table.

    Keys not in the table go to extra. Values the table cannot coerce stay in
    extra under their native key. When two native keys map to the same
    canonical field, the first one encountered in the document wins and the
    other is kept in extra.

    Args:
        meta: Parsed envelope (frontmatter mapping, JSON object, ...)
        specs: The format's field table
        reserved: Native keys the adapter handles itself (skipped entirely)

    Returns:
        (canonical values keyed by field name, extra)
    """
    table = {spec.native: spec for spec in specs}
    skip = set(reserved)
    values: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for key, raw in meta.items():
        if key in skip:
            continue
        spec = table.get(key)
        if spec is None or spec.attribute in values:
            extra[key] = raw
            continue
        value = spec.coerce(raw)
        if value is None:
            extra[key] = raw
            continue
        values[spec.attribute] = value

    return values, extra


def render_fields(pkg: CanonicalPackage, specs: Iterable[FieldSpec]) -> dict[str, Any]:
    """Inverse of read_fields: emit every set attribute the table can express."""
    rendered: dict[str, Any] = {}
    for spec in specs:
        if not spec.emit:
            continue
        value = _canonical_value(pkg, spec.attribute)
        if value is None or value == []:
            continue
        rendered[spec.native] = spec.render(value)
    return rendered


def _canonical_value(pkg: CanonicalPackage, name: str) -> Any:
    if name in PACKAGE_FIELDS:
        return getattr(pkg, name) or None
    return getattr(pkg.attributes, name)


def origin_extra(pkg: CanonicalPackage, format: Format) -> dict[str, Any]:
    """Return extra fields only when serializing back to the origin format."""
    if pkg.format is format:
        return dict(pkg.extra)
    return {}


def detect_subtype(
    meta: dict[str, Any],
    seed: SeedMetadata,
    format_hint: Subtype | None = None,
) -> Subtype:
    """
    Decide a parsed document's subtype.

    Priority:
    1. Seed hint (caller knows what it is installing)
    2. Explicit marker keys (``subtype``, ``type``, ``agentType``, ...)
    3. Format-specific hint computed by the adapter
    4. ``rule``

    Example:
        >>> detect_subtype({"skillType": "skill"}, SeedMetadata())
        <Subtype.SKILL: 'skill'>
    """
    hinted = coerce_subtype(seed.subtype)
    if hinted is not None:
        return hinted

    for marker in SUBTYPE_MARKERS:
        if marker in meta:
            found = coerce_subtype(meta[marker])
            if found is not None:
                return found

    return format_hint or DEFAULT_SUBTYPE


def build_package(
    *,
    format: Format,
    seed: SeedMetadata,
    subtype: Subtype,
    body: str,
    values: dict[str, Any] | None = None,
    extra: dict[str, Any] | None = None,
    title: str | None = None,
) -> CanonicalPackage:
    """
    Assemble a CanonicalPackage from parsed values and the seed.

    Name precedence: name declared in the document, seed name, seed id, then
    ``converted-package``. The id falls back to the sanitized name.
    """
    values = dict(values or {})
    name = values.pop("name", None) or seed.name or seed.id or DEFAULT_PACKAGE_NAME
    author = values.pop("author", None) or seed.author
    package_id = seed.id or sanitize_name(name, default=DEFAULT_PACKAGE_NAME)

    return CanonicalPackage(
        id=package_id,
        name=name,
        version=seed.version,
        author=author,
        tags=list(seed.tags),
        format=format,
        subtype=subtype,
        title=title,
        body=body,
        attributes=PackageAttributes(**values),
        extra=extra or {},
    )


def dropped_attributes(pkg: CanonicalPackage, represented: Iterable[str]) -> list[str]:
    """Return canonical attribute aliases that are set but not representable."""
    keep = set(represented)
    dropped = []
    for name in ATTRIBUTE_NAMES:
        if name in keep or getattr(pkg.attributes, name) in (None, []):
            continue
        dropped.append(to_camel(name))
    return dropped


def quality_score(resolution: SubtypeResolution, dropped: int, warnings: int) -> int:
    """
    Score how faithfully a conversion carried the package (0-100).

    Deductions:
    - 10 for a subtype substitution, 20 when an invokable subtype becomes a rule
    - 10 for each attribute the target cannot represent
    - 5 for each format-specific warning

    Example:
        >>> quality_score(resolve_subtype("cursor", "skill"), dropped=1, warnings=0)
        80
    """
    score = QUALITY_MAX
    if resolution.substituted:
        lost_invocation = resolution.requested in INVOKABLE_SUBTYPES and resolution.subtype is Subtype.RULE
        score -= QUALITY_PENALTY_LOST_INVOCATION if lost_invocation else QUALITY_PENALTY_SUBSTITUTION
    score -= dropped * QUALITY_PENALTY_DROPPED_ATTRIBUTE
    score -= warnings * QUALITY_PENALTY_WARNING
    return max(0, score)


def make_result(
    pkg: CanonicalPackage,
    format: Format,
    content: str,
    resolution: SubtypeResolution,
    represented: Iterable[str],
    warnings: Iterable[str] = (),
    lossy: bool = False,
) -> ConversionResult:
    """Package serializer output with substitution, lossiness and quality reporting.

    ``warnings`` are the adapter's own findings; ``lossy`` marks content the
    adapter altered even though every attribute was written.
    """
    messages = list(warnings)
    format_warnings = len(messages)
    dropped = dropped_attributes(pkg, represented)
    if dropped:
        messages.append(f"{format.value} cannot represent: {', '.join(dropped)}")
    if resolution.substitution is not None:
        messages.append(str(resolution.substitution))

    return ConversionResult(
        content=content,
        format=format,
        subtype=resolution.subtype,
        substitution=resolution.substitution,
        warnings=messages,
        lossy=lossy or bool(dropped),
        quality_score=quality_score(resolution, len(dropped), format_warnings),
    )


def parse_frontmatter_document(
    content: str,
    seed: SeedMetadata | dict | None,
    *,
    format: Format,
    fields: Iterable[FieldSpec],
    subtype_hint: Callable[[dict[str, Any]], Subtype | None] | None = None,
) -> CanonicalPackage:
    """Parse a markdown document with an optional ``---`` YAML header.

    Raises:
        EmptyDocumentError: If content is blank
        MalformedFrontmatterError: If the header is unterminated or invalid
    """
    text = ensure_content(content, format.value)
    meta, body, _ = split_frontmatter(text, format.value)
    values, extra = read_fields(meta, fields)
    seed = coerce_seed(seed)
    hint = subtype_hint(meta) if subtype_hint is not None else None
    return build_package(
        format=format,
        seed=seed,
        subtype=detect_subtype(meta, seed, hint),
        body=body,
        values=values,
        extra=extra,
    )


def frontmatter_document(pkg: CanonicalPackage, header: dict[str, Any] | None) -> str:
    """Render header (None for no header at all) followed by the markdown body."""
    frontmatter = build_frontmatter(header) if header is not None else ""
    text = finish_document(frontmatter, join_title(pkg.title, pkg.body))
    return text or "\n"


def with_extra(header: dict[str, Any], pkg: CanonicalPackage, format: Format) -> dict[str, Any]:
    """Append origin extras after the table fields without overriding them."""
    merged = dict(header)
    for key, value in origin_extra(pkg, format).items():
        merged.setdefault(key, value)
    return merged
