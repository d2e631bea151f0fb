"""Format dispatch - one adapter record per supported format.

Per KERNEL_PHILOSOPHY: Adding a format is one module plus one table entry.
"""

import logging

from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..schema import coerce_format
from . import agents_md
from . import claude
from . import continuedev
from . import copilot
from . import cursor
from . import kiro
from . import ruler
from . import windsurf
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from .agents_md import from_agents_md
from .agents_md import to_agents_md
from .claude import from_claude
from .claude import to_claude
from .continuedev import from_continue
from .continuedev import to_continue
from .copilot import from_copilot
from .copilot import to_copilot
from .cursor import from_cursor
from .cursor import to_cursor
from .kiro import from_kiro
from .kiro import to_kiro
from .ruler import from_ruler
from .ruler import to_ruler
from .windsurf import from_windsurf
from .windsurf import to_windsurf

logger = logging.getLogger(__name__)

ADAPTERS: dict[Format, FormatAdapter] = {
    adapter.format: adapter
    for adapter in (
        claude.ADAPTER,
        cursor.ADAPTER,
        windsurf.ADAPTER,
        continuedev.ADAPTER,
        copilot.ADAPTER,
        kiro.ADAPTER,
        agents_md.ADAPTER,
        ruler.ADAPTER,
    )
}


def get_adapter(format: Format | str) -> FormatAdapter:
    """Look up the adapter for a format identifier (aliases accepted).

    Raises:
        UnsupportedFormatError: If the identifier names no known format
    """
    return ADAPTERS[coerce_format(format)]


def parse_document(
    format: Format | str,
    content: str,
    seed: SeedMetadata | dict | None = None,
) -> CanonicalPackage:
    """Parse content in the given format into a CanonicalPackage."""
    adapter = get_adapter(format)
    pkg = adapter.parse(content, seed)
    logger.debug(f"Parsed {adapter.format.value} document as {pkg.subtype} '{pkg.name}'")
    return pkg


def serialize_package(
    format: Format | str,
    pkg: CanonicalPackage,
    options: FormatOptions | dict | None = None,
) -> ConversionResult:
    """Serialize a CanonicalPackage into the given format."""
    adapter = get_adapter(format)
    result = adapter.serialize(pkg, options)
    if result.substitution is not None:
        logger.debug(f"Subtype substituted for '{pkg.name}': {result.substitution}")
    if result.lossy:
        logger.debug(
            f"Lossy conversion of '{pkg.name}' to {adapter.format.value} "
            f"(quality {result.quality_score}): {result.warnings}"
        )
    return result


def convert(
    content: str,
    source: Format | str,
    target: Format | str,
    seed: SeedMetadata | dict | None = None,
    options: FormatOptions | dict | None = None,
) -> ConversionResult:
    """
    Convert a document from one format to another through the canonical model.

    Args:
        content: Raw source document
        source: Source format identifier
        target: Target format identifier
        seed: Publish-time metadata (id, name, version, author, tags, subtype)
        options: Per-format serializer options

    Returns:
        ConversionResult for the target format

    Raises:
        UnsupportedFormatError: If either format identifier is unknown
        DocumentError: If the source document cannot be parsed

    Example:
        >>> result = convert(claude_doc, "claude", "ruler", {"id": "test-agent"})
        >>> result.content.splitlines()[0]
        '<!-- Package: test-agent -->'
    """
    target_adapter = get_adapter(target)
    pkg = parse_document(source, content, seed)
    logger.debug(f"Converting '{pkg.name}' from {pkg.format} to {target_adapter.format.value}")
    return serialize_package(target_adapter.format, pkg, options)


__all__ = [
    "ADAPTERS",
    "ConversionResult",
    "FieldSpec",
    "FormatAdapter",
    "convert",
    "get_adapter",
    "parse_document",
    "serialize_package",
    "from_agents_md",
    "from_claude",
    "from_continue",
    "from_copilot",
    "from_cursor",
    "from_kiro",
    "from_ruler",
    "from_windsurf",
    "to_agents_md",
    "to_claude",
    "to_continue",
    "to_copilot",
    "to_cursor",
    "to_kiro",
    "to_ruler",
    "to_windsurf",
]
