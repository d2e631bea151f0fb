"""Protocols for the collaborators around the conversion engine.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.
"""

from pathlib import Path
from typing import Protocol

from .schema import Format


class FormatDetectorProtocol(Protocol):
    """Protocol for source format detection.

    Apps can provide any implementation (path-only, content sniffing, user
    prompt, ...). The library ships HeuristicDetector.
    """

    def detect(self, path: Path | None, content: str) -> Format | None:
        """Return the format of a document, or None when it cannot be told.

        Args:
            path: Where the document came from (may be None for in-memory content)
            content: Raw document text
        """
        ...


class OutputWriterProtocol(Protocol):
    """Protocol for persisting converted content.

    Example implementations:
    - FileSystemWriter: atomic writes to local disk
    - In-memory writers for dry runs and tests
    """

    def write(self, path: Path, content: str) -> None:
        """Persist content at path, creating parent directories as needed.

        Raises:
            Exception: If the content cannot be written
        """
        ...
