"""Tests for package installer (protocol-based)."""

import tempfile
from pathlib import Path

import pytest
from promptpack import Format
from promptpack import FormatResolver
from promptpack import InstallError
from promptpack import MalformedFrontmatterError
from promptpack import PackageLock
from promptpack import Subtype
from promptpack import install_package
from promptpack import uninstall_package

CLAUDE_AGENT = """---
name: code-reviewer
description: Reviews pull requests
allowed-tools: Read, Grep
---

# Code Reviewer

Review every change carefully.
"""


class MemoryWriter:
    """In-memory writer for testing."""

    def __init__(self):
        self.files: dict[Path, str] = {}

    def write(self, path: Path, content: str) -> None:
        self.files[path] = content


class FailingWriter:
    """Writer that always fails."""

    def write(self, path: Path, content: str) -> None:
        raise OSError("disk full")


class FixedDetector:
    """Detector that always answers the same format."""

    def __init__(self, format):
        self.format = format
        self.calls = []

    def detect(self, path, content):
        self.calls.append(path)
        return self.format


def test_install_package_basic():
    """Test converting and writing a package under the project root."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)

        installed = install_package(
            CLAUDE_AGENT,
            source="claude",
            target="cursor",
            seed={"id": "code-reviewer", "subtype": "rule"},
            resolver=FormatResolver(project_root=root),
        )

        expected = root / ".cursor/rules/code-reviewer.mdc"
        assert installed.path == expected
        assert expected.exists()
        content = expected.read_text()
        assert content.startswith("---\ndescription: Reviews pull requests\n")
        assert "# Code Reviewer" in content
        assert installed.result.format is Format.CURSOR
        assert installed.package.name == "code-reviewer"


def test_install_package_with_lock():
    """Test installation records a lock entry relative to the project root."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        lock = PackageLock(lock_path=root / "promptpack.lock")

        install_package(
            CLAUDE_AGENT,
            source="claude",
            target="copilot",
            seed={"id": "code-reviewer", "version": "2.0.0", "subtype": "agent"},
            resolver=FormatResolver(project_root=root),
            lock=lock,
        )

        entry = lock.get_entry("code-reviewer")
        assert entry is not None
        assert entry.version == "2.0.0"
        assert entry.format == "copilot"
        assert entry.subtype == "chatmode"
        assert entry.path == ".github/chatmodes/code-reviewer.chatmode.md"


def test_install_package_substitution_warning():
    """Substituted subtypes are reported on the installed package."""
    installed = install_package(
        CLAUDE_AGENT,
        source="claude",
        target="cursor",
        seed={"id": "pdf", "subtype": "skill"},
        resolver=FormatResolver(project_root=Path("/project")),
        writer=MemoryWriter(),
    )

    assert installed.path == Path("/project/.cursor/rules/code-reviewer.mdc")
    assert installed.result.subtype is Subtype.RULE
    assert any("no 'skill' subtype" in warning for warning in installed.warnings)


def test_install_package_custom_writer_and_name():
    """Apps inject the writer; name overrides only the filename."""
    writer = MemoryWriter()

    installed = install_package(
        CLAUDE_AGENT,
        source="claude",
        target="windsurf",
        seed={"id": "code-reviewer"},
        resolver=FormatResolver(project_root=Path("/project")),
        writer=writer,
        name="Reviewer Rules",
    )

    assert installed.path == Path("/project/.windsurf/rules/reviewer-rules.md")
    assert writer.files[installed.path] == installed.result.content


def test_install_package_detects_source_and_subtype_from_path():
    """Without an explicit source the detector and source path are used."""
    writer = MemoryWriter()

    installed = install_package(
        "# PDF Tools\n\nExtract text from PDFs.\n",
        target="claude",
        seed={"id": "pdf-tools"},
        source_path=Path("/elsewhere/.claude/skills/pdf-tools/SKILL.md"),
        resolver=FormatResolver(project_root=Path("/project")),
        writer=writer,
    )

    assert installed.package.subtype == Subtype.SKILL
    assert installed.path == Path("/project/.claude/skills/pdf-tools/SKILL.md")


def test_install_package_injected_detector():
    """A custom detector is consulted when source is omitted."""
    detector = FixedDetector(Format.AGENTS_MD)

    installed = install_package(
        "# Guide\n\nRun make.\n",
        target="ruler",
        seed={"id": "guide"},
        detector=detector,
        resolver=FormatResolver(project_root=Path("/project")),
        writer=MemoryWriter(),
    )

    assert detector.calls == [None]
    assert installed.path == Path("/project/.ruler/guide.md")


def test_install_package_undetectable_source():
    """Test installation fails when the source format cannot be determined."""
    with pytest.raises(InstallError, match="Could not detect"):
        install_package(
            "# Plain notes",
            target="cursor",
            seed={"id": "notes"},
            resolver=FormatResolver(project_root=Path("/project")),
            writer=MemoryWriter(),
        )


def test_install_package_write_failure_is_wrapped():
    """Writer errors surface as InstallError."""
    with pytest.raises(InstallError, match="disk full"):
        install_package(
            CLAUDE_AGENT,
            source="claude",
            target="cursor",
            seed={"id": "x"},
            resolver=FormatResolver(project_root=Path("/project")),
            writer=FailingWriter(),
        )


def test_install_package_parse_errors_propagate():
    """Document errors are raised unchanged."""
    with pytest.raises(MalformedFrontmatterError):
        install_package(
            "---\nname: [unclosed\n---\n\nBody",
            source="claude",
            target="cursor",
            seed={"id": "x"},
            resolver=FormatResolver(project_root=Path("/project")),
            writer=MemoryWriter(),
        )


def test_uninstall_package_with_lock():
    """Test uninstall removes the file, the empty skill directory and the lock entry."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        lock = PackageLock(lock_path=root / "promptpack.lock")

        installed = install_package(
            CLAUDE_AGENT,
            source="claude",
            target="claude",
            seed={"id": "code-reviewer", "subtype": "skill"},
            resolver=FormatResolver(project_root=root),
            lock=lock,
        )
        assert installed.path == root / ".claude/skills/code-reviewer/SKILL.md"

        removed = uninstall_package("code-reviewer", lock=lock, project_root=root)

        assert removed == installed.path
        assert not installed.path.exists()
        assert not installed.path.parent.exists()
        assert not lock.is_installed("code-reviewer")


def test_uninstall_package_missing_file():
    """A lock entry whose file is already gone is still removed."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        lock = PackageLock(lock_path=root / "promptpack.lock")
        lock.add_entry("gone", "1.0.0", "cursor", "rule", ".cursor/rules/gone.mdc")

        uninstall_package("gone", lock=lock, project_root=root)

        assert not lock.is_installed("gone")


def test_uninstall_nonexistent_package():
    """Test uninstalling a package that is not in the lock file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "promptpack.lock")

        with pytest.raises(InstallError, match="not installed"):
            uninstall_package("nonexistent", lock=lock, project_root=Path(tmpdir))
