"""Package installation pipeline (protocol-based).

Per KERNEL_PHILOSOPHY: Mechanism not policy - the library doesn't know WHERE a
project lives or HOW files are persisted; apps inject the resolver (project
root), writer, detector and lock.

Per IMPLEMENTATION_PHILOSOPHY:
- Protocol-based: Apps provide writers and detectors
- Ruthless simplicity: detect → parse → serialize → resolve → write → lock
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .detection import HeuristicDetector
from .detection import detect_subtype
from .exceptions import InstallError
from .exceptions import PromptPackError
from .formats import ConversionResult
from .formats import parse_document
from .formats import serialize_package
from .formats._base import coerce_seed
from .lock import PackageLock
from .protocols import FormatDetectorProtocol
from .protocols import OutputWriterProtocol
from .resolver import FormatResolver
from .schema import CanonicalPackage
from .schema import Format
from .schema import FormatOptions
from .schema import SeedMetadata
from .schema import Subtype
from .schema import coerce_format
from .writer import FileSystemWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledPackage:
    """What install_package() produced and where it went."""

    package: CanonicalPackage
    result: ConversionResult
    path: Path

    @property
    def warnings(self) -> list[str]:
        return self.result.warnings


def _lock_path(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        return path


def install_package(
    content: str,
    *,
    target: Format | str,
    seed: SeedMetadata | dict | None = None,
    source: Format | str | None = None,
    source_path: Path | None = None,
    resolver: FormatResolver | None = None,
    writer: OutputWriterProtocol | None = None,
    detector: FormatDetectorProtocol | None = None,
    lock: PackageLock | None = None,
    options: FormatOptions | dict | None = None,
    output_path: Path | str | None = None,
    name: str | None = None,
    repository_wide: bool = False,
) -> InstalledPackage:
    """
    Convert a document and install it into a project (mechanism only).

    Apps provide:
    - resolver: Project root the install paths are relative to (app policy)
    - writer: How content is persisted (defaults to FileSystemWriter)
    - detector: How the source format is recognized when ``source`` is not given
    - lock: Optional lock manager

    Process:
    1. Determine the source format (explicit, else detector)
    2. Take a subtype hint from the seed or the source path
    3. Parse into a CanonicalPackage
    4. Serialize for the target format
    5. Resolve the install path (explicit path / name override honored)
    6. Write the file
    7. Record the install in the lock file (if provided)

    Args:
        content: Raw source document
        target: Format to install as
        seed: Publish-time metadata
        source: Source format (detected when omitted)
        source_path: Where the content came from, used for detection hints
        resolver: Path resolver (defaults to the current directory as project root)
        writer: Output writer
        detector: Format detector
        lock: Optional lock file manager
        options: Per-format serializer options
        output_path: Explicit destination, overrides the path template
        name: Filename override
        repository_wide: Install Copilot rules as ``.github/copilot-instructions.md``

    Returns:
        InstalledPackage with the parsed package, conversion result and path

    Raises:
        DocumentError: If the source document cannot be parsed
        UnsupportedFormatError: If a format identifier is unknown
        InstallError: If detection, writing or recording fails

    Example:
        >>> installed = install_package(
        ...     content,
        ...     source="claude",
        ...     target="cursor",
        ...     seed={"id": "react-rules"},
        ...     resolver=FormatResolver(project_root=Path("/work/my-app")),
        ... )
        >>> installed.path
        PosixPath('/work/my-app/.cursor/rules/react-rules.mdc')
    """
    resolver = resolver or FormatResolver()
    writer = writer or FileSystemWriter()
    detector = detector or HeuristicDetector()

    try:
        target_format = coerce_format(target)

        # Step 1: Source format
        if source is not None:
            source_format = coerce_format(source)
        else:
            source_format = detector.detect(source_path, content)
            if source_format is None:
                raise InstallError(
                    f"Could not detect the format of {source_path or 'the given content'}; pass source explicitly",
                    context={"source_path": str(source_path) if source_path else None},
                )
        logger.debug(f"Source format: {source_format.value}")

        # Step 2: Subtype hint
        seed = coerce_seed(seed)
        if seed.subtype is None and source_path is not None:
            hint = detect_subtype(source_path)
            if hint is not None:
                seed = seed.model_copy(update={"subtype": hint.value})
                logger.debug(f"Subtype hint from {source_path}: {hint.value}")

        # Steps 3-4: Convert
        pkg = parse_document(source_format, content, seed)
        result = serialize_package(target_format, pkg, options)

        # Step 5: Resolve path
        install_target = resolver.resolve_path(
            target_format,
            pkg.subtype,
            pkg.name,
            output_path=output_path,
            name_override=name,
            repository_wide=repository_wide,
        )

        # Step 6: Write
        logger.info(f"Installing {pkg.id} as {target_format.value}/{result.subtype.value} to {install_target.path}")
        writer.write(install_target.path, result.content)

        # Step 7: Lock
        if lock is not None:
            lock.add_entry(
                package_id=pkg.id,
                version=pkg.version,
                format=target_format.value,
                subtype=result.subtype.value,
                path=_lock_path(install_target.path, resolver.project_root),
            )

        logger.info(f"Successfully installed package: {pkg.id}")
        return InstalledPackage(package=pkg, result=result, path=install_target.path)

    except Exception as e:
        if isinstance(e, PromptPackError):
            raise
        raise InstallError(f"Failed to install package: {e}") from e


def uninstall_package(
    package_id: str,
    *,
    lock: PackageLock,
    project_root: Path,
) -> Path:
    """
    Uninstall a package recorded in the lock file (mechanism only, apps inject paths).

    Process:
    1. Remove the installed file
    2. Remove the skill directory if it is left empty
    3. Remove the lock entry

    Args:
        package_id: Id of the installed package
        lock: Lock file manager that recorded the install
        project_root: Root the recorded path is relative to

    Returns:
        Path of the removed file

    Raises:
        InstallError: If the package is not in the lock file or removal failed
    """
    entry = lock.get_entry(package_id)
    if entry is None:
        raise InstallError(
            f"Package '{package_id}' is not installed",
            context={"package_id": package_id, "lock_path": str(lock.lock_path)},
        )

    path = Path(entry.path)
    if not path.is_absolute():
        path = project_root / path

    try:
        logger.info(f"Uninstalling package: {package_id}")
        if path.exists():
            path.unlink()
        else:
            logger.warning(f"Installed file for {package_id} is already gone: {path}")

        if entry.subtype == Subtype.SKILL and path.parent.exists() and not any(path.parent.iterdir()):
            path.parent.rmdir()
            logger.debug(f"Removed empty skill directory {path.parent}")

        lock.remove_entry(package_id)
        logger.info(f"Successfully uninstalled: {package_id}")
        return path

    except Exception as e:
        raise InstallError(f"Failed to uninstall package '{package_id}': {e}") from e
