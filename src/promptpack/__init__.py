"""promptpack - Convert and install AI-assistant configuration across tool formats.

Every format converts through one canonical package: parse with ``from_x``,
serialize with ``to_x``, or let ``convert`` dispatch by format identifier.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (project
root, lock path, writer, detector).
"""

from .detection import HeuristicDetector
from .detection import detect_format
from .detection import detect_subtype
from .discovery import DiscoveredArtifact
from .discovery import ProjectArtifacts
from .discovery import discover_artifacts
from .discovery import list_artifacts
from .exceptions import DocumentError
from .exceptions import EmptyDocumentError
from .exceptions import InstallError
from .exceptions import MalformedDocumentError
from .exceptions import MalformedFrontmatterError
from .exceptions import PromptPackError
from .exceptions import SubtypeSubstitutedWarning
from .exceptions import UnsupportedFormatError
from .formats import ADAPTERS
from .formats import ConversionResult
from .formats import FormatAdapter
from .formats import convert
from .formats import from_agents_md
from .formats import from_claude
from .formats import from_continue
from .formats import from_copilot
from .formats import from_cursor
from .formats import from_kiro
from .formats import from_ruler
from .formats import from_windsurf
from .formats import get_adapter
from .formats import parse_document
from .formats import serialize_package
from .formats import to_agents_md
from .formats import to_claude
from .formats import to_continue
from .formats import to_copilot
from .formats import to_cursor
from .formats import to_kiro
from .formats import to_ruler
from .formats import to_windsurf
from .installer import InstalledPackage
from .installer import install_package
from .installer import uninstall_package
from .lock import PackageLock
from .lock import PackageLockEntry
from .protocols import FormatDetectorProtocol
from .protocols import OutputWriterProtocol
from .resolver import FormatResolver
from .resolver import InstallTarget
from .resolver import SubtypeResolution
from .resolver import resolve_subtype
from .schema import CanonicalPackage
from .schema import CopilotConfig
from .schema import Format
from .schema import FormatOptions
from .schema import Inclusion
from .schema import KiroConfig
from .schema import PackageAttributes
from .schema import SeedMetadata
from .schema import Subtype
from .schema import validate
from .utils import sanitize_name
from .writer import FileSystemWriter

__all__ = [
    # Canonical model
    "CanonicalPackage",
    "PackageAttributes",
    "SeedMetadata",
    "Format",
    "Subtype",
    "Inclusion",
    "validate",
    # Options
    "FormatOptions",
    "KiroConfig",
    "CopilotConfig",
    # Conversion
    "ADAPTERS",
    "FormatAdapter",
    "ConversionResult",
    "get_adapter",
    "parse_document",
    "serialize_package",
    "convert",
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
    # Resolution
    "FormatResolver",
    "InstallTarget",
    "SubtypeResolution",
    "resolve_subtype",
    # Detection
    "HeuristicDetector",
    "detect_format",
    "detect_subtype",
    "FormatDetectorProtocol",
    # Installation
    "install_package",
    "uninstall_package",
    "InstalledPackage",
    "FileSystemWriter",
    "OutputWriterProtocol",
    # Lock file
    "PackageLock",
    "PackageLockEntry",
    # Discovery
    "DiscoveredArtifact",
    "ProjectArtifacts",
    "discover_artifacts",
    "list_artifacts",
    # Exceptions
    "PromptPackError",
    "DocumentError",
    "EmptyDocumentError",
    "MalformedDocumentError",
    "MalformedFrontmatterError",
    "UnsupportedFormatError",
    "InstallError",
    "SubtypeSubstitutedWarning",
    # Utilities
    "sanitize_name",
]

__version__ = "0.1.0"
