"""Filesystem writer - persists converted content atomically.

Per IMPLEMENTATION_PHILOSOPHY: A failed write never leaves a half-written file.
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class FileSystemWriter:
    """Write converted documents to disk (implements OutputWriterProtocol)."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def write(self, path: Path, content: str) -> None:
        """
        Write content to path, replacing any existing file atomically.

        Parent directories are created as needed. Content goes to a temporary
        file in the same directory first and is then moved into place.

        Args:
            path: Destination file
            content: Document text

        Raises:
            OSError: If the directory or file cannot be written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote {len(content)} characters to {path}")
