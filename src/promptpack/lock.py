"""Package lock file management.

Tracks which packages are installed into a project, in which format and where.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (lock location is policy)
- This is library mechanism - apps inject lock path (policy)

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Simple JSON file, no complex format
- YAGNI: Just track what's needed to find and remove an install
"""

import json
import logging
from dataclasses import asdict
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class PackageLockEntry:
    """Entry in the package lock file."""

    id: str
    version: str
    format: str
    subtype: str
    path: str
    installed_at: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PackageLockEntry":
        """Create from dictionary."""
        return cls(**data)


class PackageLock:
    """
    Package lock file manager (with injected lock path).

    Lock format (JSON):
    {
      "version": "1.0",
      "packages": {
        "react-rules": {
          "id": "react-rules",
          "version": "1.0.0",
          "format": "cursor",
          "subtype": "rule",
          "path": ".cursor/rules/react-rules.mdc",
          "installed_at": "2025-10-26T12:00:00+00:00"
        }
      }
    }
    """

    VERSION = "1.0"

    def __init__(self, lock_path: Path):
        """Initialize lock manager with app-provided lock path.

        Args:
            lock_path: Path to lock file (app determines location)

        Example:
            >>> lock = PackageLock(lock_path=Path("/work/my-app/promptpack.lock"))
        """
        self.lock_path = Path(lock_path)
        self._data: dict[str, PackageLockEntry] = {}
        self._load()

    def _load(self) -> None:
        """Load lock file if it exists."""
        if not self.lock_path.exists():
            self._data = {}
            return

        try:
            with open(self.lock_path, encoding="utf-8") as f:
                data = json.load(f)

            if data.get("version") != self.VERSION:
                logger.warning(f"Lock file version mismatch: expected {self.VERSION}, got {data.get('version')}")

            packages = data.get("packages", {})
            self._data = {package_id: PackageLockEntry.from_dict(entry) for package_id, entry in packages.items()}

            logger.debug(f"Loaded {len(self._data)} packages from lock file")

        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Failed to load lock file {self.lock_path}: {e}")
            self._data = {}

    def _save(self) -> None:
        """Save lock file."""
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": self.VERSION,
            "packages": {package_id: entry.to_dict() for package_id, entry in self._data.items()},
        }

        try:
            with open(self.lock_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            logger.debug(f"Saved lock file with {len(self._data)} packages")
        except OSError as e:
            logger.error(f"Failed to save lock file {self.lock_path}: {e}")

    def add_entry(
        self,
        package_id: str,
        version: str,
        format: str,
        subtype: str,
        path: Path | str,
    ) -> PackageLockEntry:
        """
        Add or update a package in the lock file.

        Args:
            package_id: Package id
            version: Installed version
            format: Format the package was written in
            subtype: Effective subtype after substitution
            path: Installed file (relative to project root when possible)

        Returns:
            The stored entry
        """
        entry = PackageLockEntry(
            id=package_id,
            version=version,
            format=str(format),
            subtype=str(subtype),
            path=Path(path).as_posix(),
            installed_at=datetime.now(UTC).isoformat(),
        )

        self._data[package_id] = entry
        self._save()

        logger.debug(f"Added {package_id} to lock file")
        return entry

    def remove_entry(self, package_id: str) -> None:
        """
        Remove a package from the lock file.

        Args:
            package_id: Package id
        """
        if package_id in self._data:
            del self._data[package_id]
            self._save()
            logger.debug(f"Removed {package_id} from lock file")

    def get_entry(self, package_id: str) -> PackageLockEntry | None:
        """Get lock entry for a package, or None if not installed."""
        return self._data.get(package_id)

    def list_entries(self) -> list[PackageLockEntry]:
        """List all installed packages."""
        return list(self._data.values())

    def is_installed(self, package_id: str) -> bool:
        return package_id in self._data
