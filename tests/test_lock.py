"""Tests for PackageLock with injected lock path."""

import json
import tempfile
from pathlib import Path

from promptpack import PackageLock


def test_lock_with_injected_path():
    """Test lock uses injected path (not hardcoded)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "custom.lock"

        lock = PackageLock(lock_path=lock_path)

        assert lock.lock_path == lock_path
        assert not lock_path.exists()  # Not created until first save


def test_add_and_get_entry():
    """Test adding and retrieving lock entries."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "test.lock")

        lock.add_entry(
            package_id="react-rules",
            version="1.2.0",
            format="cursor",
            subtype="rule",
            path=Path(".cursor/rules/react-rules.mdc"),
        )

        entry = lock.get_entry("react-rules")
        assert entry is not None
        assert entry.id == "react-rules"
        assert entry.version == "1.2.0"
        assert entry.format == "cursor"
        assert entry.subtype == "rule"
        assert entry.path == ".cursor/rules/react-rules.mdc"
        assert entry.installed_at


def test_add_entry_replaces_existing():
    """Re-adding a package overwrites its previous entry."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "test.lock")

        lock.add_entry("pkg", "1.0.0", "claude", "agent", ".claude/agents/pkg.md")
        lock.add_entry("pkg", "2.0.0", "cursor", "agent", ".cursor/agents/pkg.mdc")

        assert len(lock.list_entries()) == 1
        assert lock.get_entry("pkg").version == "2.0.0"
        assert lock.get_entry("pkg").format == "cursor"


def test_remove_entry():
    """Test removing lock entry."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "test.lock")

        lock.add_entry("test", "1.0.0", "kiro", "rule", ".kiro/steering/test.md")

        assert lock.is_installed("test")

        lock.remove_entry("test")

        assert not lock.is_installed("test")
        assert lock.get_entry("test") is None

        # Removing again is a no-op
        lock.remove_entry("test")


def test_list_entries():
    """Test listing all lock entries."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "test.lock")

        lock.add_entry("one", "1.0.0", "claude", "skill", ".claude/skills/one/SKILL.md")
        lock.add_entry("two", "1.0.0", "windsurf", "workflow", ".windsurf/workflows/two.md")

        ids = {entry.id for entry in lock.list_entries()}
        assert ids == {"one", "two"}


def test_lock_persistence():
    """Test lock file persists across instances."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "nested" / "test.lock"

        lock1 = PackageLock(lock_path=lock_path)
        lock1.add_entry("persistent", "1.0.0", "ruler", "rule", ".ruler/persistent.md")

        assert lock_path.exists()
        data = json.loads(lock_path.read_text())
        assert data["version"] == PackageLock.VERSION
        assert data["packages"]["persistent"]["format"] == "ruler"

        lock2 = PackageLock(lock_path=lock_path)
        entry = lock2.get_entry("persistent")
        assert entry is not None
        assert entry.path == ".ruler/persistent.md"


def test_lock_version_mismatch_still_loads(caplog):
    """Entries from a lock with another version are loaded with a warning."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "test.lock"
        lock_path.write_text(
            json.dumps(
                {
                    "version": "0.9",
                    "packages": {
                        "old": {
                            "id": "old",
                            "version": "1.0.0",
                            "format": "claude",
                            "subtype": "rule",
                            "path": ".claude/rules/old.md",
                            "installed_at": "2025-01-01T00:00:00+00:00",
                        }
                    },
                }
            )
        )

        lock = PackageLock(lock_path=lock_path)

        assert lock.is_installed("old")
        assert "version mismatch" in caplog.text


def test_corrupt_lock_file_starts_empty():
    """A lock file that cannot be parsed is treated as empty."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "test.lock"
        lock_path.write_text("{not json")

        lock = PackageLock(lock_path=lock_path)

        assert lock.list_entries() == []

        lock.add_entry("fresh", "1.0.0", "cursor", "rule", ".cursor/rules/fresh.mdc")
        assert PackageLock(lock_path=lock_path).is_installed("fresh")
