"""Source format detection from path conventions and content heuristics.

Per KERNEL_PHILOSOPHY: Detection is a collaborator behind a protocol; apps that
know the format up front skip it entirely.

Order:
1. Path conventions (install path templates, tool directories, well-known files)
2. Content heuristics (JSON object, Ruler comment header, frontmatter keys)
"""

import json
import logging
import re
from pathlib import Path
from pathlib import PurePosixPath

from .exceptions import PromptPackError
from .resolver import COPILOT_REPOSITORY_WIDE_PATH
from .resolver import PATH_TEMPLATES
from .resolver import template_pattern
from .schema import Format
from .schema import Subtype
from .utils import split_frontmatter
from .utils import strip_bom

logger = logging.getLogger(__name__)

_TEMPLATE_PATTERNS = [
    (template_pattern(template), format, subtype) for (format, subtype), template in PATH_TEMPLATES.items()
]
_COPILOT_WIDE_PATTERN = template_pattern(COPILOT_REPOSITORY_WIDE_PATH)
_RULER_HEADER = re.compile(r"^<!--\s*package\s*:", re.IGNORECASE)
_COPILOT_SUFFIXES = (".instructions.md", ".chatmode.md", ".prompt.md")

# Tool directories, checked when no template matched exactly
_DIRECTORY_HINTS = (
    (".claude", Format.CLAUDE),
    (".cursor", Format.CURSOR),
    (".windsurf", Format.WINDSURF),
    (".continue", Format.CONTINUE),
    (".kiro", Format.KIRO),
    (".ruler", Format.RULER),
)

_WELL_KNOWN_FILES = {
    ".cursorrules": Format.CURSOR,
    ".windsurfrules": Format.WINDSURF,
    ".continuerules": Format.CONTINUE,
    "agents.md": Format.AGENTS_MD,
    "copilot-instructions.md": Format.COPILOT,
}


def _posix(path: Path | str) -> str:
    return PurePosixPath(Path(path).as_posix()).as_posix()


def detect_format_from_path(path: Path | str) -> Format | None:
    """Return the format implied by a file path, or None."""
    posix = _posix(path)

    if _COPILOT_WIDE_PATTERN.search(posix):
        return Format.COPILOT
    for pattern, format, _ in _TEMPLATE_PATTERNS:
        if pattern.search(posix):
            return format

    name = PurePosixPath(posix).name.lower()
    if name in _WELL_KNOWN_FILES:
        return _WELL_KNOWN_FILES[name]
    if name.endswith(".mdc"):
        return Format.CURSOR

    parts = PurePosixPath(posix).parts
    if ".github" in parts and name.endswith(_COPILOT_SUFFIXES):
        return Format.COPILOT
    for directory, format in _DIRECTORY_HINTS:
        if directory in parts:
            return format
    return None


def detect_format_from_content(content: str) -> Format | None:
    """
    Return the format implied by document content, or None.

    Frontmatter key rules, first match wins:
    - ``inclusion`` → Kiro
    - ``applyTo`` → Copilot
    - ``globs`` or ``alwaysApply`` → Cursor
    - ``name``, ``tools`` or ``allowed-tools`` → Claude
    - ``description`` only → Cursor

    Raises:
        MalformedFrontmatterError: If a frontmatter block is present but invalid
    """
    text = strip_bom(content or "").replace("\r\n", "\n")
    stripped = text.lstrip()
    if not stripped:
        return None

    if stripped.startswith("{"):
        try:
            if isinstance(json.loads(stripped), dict):
                return Format.CONTINUE
        except json.JSONDecodeError:
            return None

    if _RULER_HEADER.match(stripped):
        return Format.RULER

    meta, _, present = split_frontmatter(text, "unknown")
    if not present:
        return None
    if "inclusion" in meta:
        return Format.KIRO
    if "applyTo" in meta:
        return Format.COPILOT
    if "globs" in meta or "alwaysApply" in meta:
        return Format.CURSOR
    if "name" in meta or "tools" in meta or "allowed-tools" in meta:
        return Format.CLAUDE
    if "description" in meta:
        return Format.CURSOR
    return None


def detect_format(path: Path | str | None, content: str) -> Format | None:
    """
    Detect a document's format from its path, then its content.

    Never raises; a document whose frontmatter cannot be parsed is reported
    as undetectable.

    Example:
        >>> detect_format(Path(".cursor/rules/react.mdc"), "")
        <Format.CURSOR: 'cursor'>
    """
    if path is not None:
        found = detect_format_from_path(path)
        if found is not None:
            logger.debug(f"Detected {found.value} from path {path}")
            return found

    try:
        found = detect_format_from_content(content)
    except PromptPackError as e:
        logger.debug(f"Content heuristics failed for {path}: {e}")
        return None

    if found is not None:
        logger.debug(f"Detected {found.value} from content of {path or '<memory>'}")
    return found


def detect_subtype(path: Path | str) -> Subtype | None:
    """
    Return the subtype implied by an install path, or None.

    Paths shared by several subtypes (Continue prompts and slash commands)
    are ambiguous and yield None.

    Example:
        >>> detect_subtype(".claude/skills/pdf/SKILL.md")
        <Subtype.SKILL: 'skill'>
    """
    posix = _posix(path)
    matches = {subtype for pattern, _, subtype in _TEMPLATE_PATTERNS if pattern.search(posix)}
    if len(matches) == 1:
        return matches.pop()
    if _COPILOT_WIDE_PATTERN.search(posix):
        return Subtype.RULE
    return None


class HeuristicDetector:
    """Path and content heuristics (implements FormatDetectorProtocol)."""

    def detect(self, path: Path | None, content: str) -> Format | None:
        return detect_format(path, content)
