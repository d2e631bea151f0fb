"""Subtype and path resolver - Where a converted package lands.

CRITICAL (KERNEL_PHILOSOPHY): The project root is app policy, not library mechanism.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (install root is policy)
- The decision tables are mechanism: constant data keyed by (format, subtype)

Per AGENTS.md: Ruthless simplicity - lookups in constant tables, no branching
per format.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from pathlib import PurePosixPath

from .exceptions import SubtypeSubstitutedWarning
from .schema import Format
from .schema import Subtype
from .schema import coerce_format
from .schema import normalize_subtype
from .utils import sanitize_name

logger = logging.getLogger(__name__)

SUPPORTED_SUBTYPES: dict[Format, frozenset[Subtype]] = {
    Format.CLAUDE: frozenset({Subtype.RULE, Subtype.AGENT, Subtype.SKILL, Subtype.SLASH_COMMAND}),
    Format.CURSOR: frozenset({Subtype.RULE, Subtype.AGENT, Subtype.SLASH_COMMAND}),
    Format.WINDSURF: frozenset({Subtype.RULE, Subtype.WORKFLOW}),
    Format.CONTINUE: frozenset({Subtype.RULE, Subtype.PROMPT, Subtype.SLASH_COMMAND}),
    Format.COPILOT: frozenset({Subtype.RULE, Subtype.CHATMODE, Subtype.PROMPT}),
    Format.KIRO: frozenset({Subtype.RULE}),
    Format.AGENTS_MD: frozenset({Subtype.RULE}),
    Format.RULER: frozenset({Subtype.RULE}),
}

# Nearest equivalent for every (format, subtype) pair the format cannot represent
SUBTYPE_SUBSTITUTIONS: dict[tuple[Format, Subtype], Subtype] = {
    (Format.CLAUDE, Subtype.TOOL): Subtype.SKILL,
    (Format.CLAUDE, Subtype.PROMPT): Subtype.SLASH_COMMAND,
    (Format.CLAUDE, Subtype.WORKFLOW): Subtype.SLASH_COMMAND,
    (Format.CLAUDE, Subtype.TEMPLATE): Subtype.SKILL,
    (Format.CLAUDE, Subtype.CHATMODE): Subtype.AGENT,
    (Format.CURSOR, Subtype.SKILL): Subtype.RULE,
    (Format.CURSOR, Subtype.TOOL): Subtype.RULE,
    (Format.CURSOR, Subtype.PROMPT): Subtype.SLASH_COMMAND,
    (Format.CURSOR, Subtype.WORKFLOW): Subtype.SLASH_COMMAND,
    (Format.CURSOR, Subtype.TEMPLATE): Subtype.RULE,
    (Format.CURSOR, Subtype.CHATMODE): Subtype.AGENT,
    (Format.WINDSURF, Subtype.AGENT): Subtype.RULE,
    (Format.WINDSURF, Subtype.SKILL): Subtype.RULE,
    (Format.WINDSURF, Subtype.SLASH_COMMAND): Subtype.WORKFLOW,
    (Format.WINDSURF, Subtype.TOOL): Subtype.RULE,
    (Format.WINDSURF, Subtype.PROMPT): Subtype.WORKFLOW,
    (Format.WINDSURF, Subtype.TEMPLATE): Subtype.RULE,
    (Format.WINDSURF, Subtype.CHATMODE): Subtype.RULE,
    (Format.CONTINUE, Subtype.AGENT): Subtype.RULE,
    (Format.CONTINUE, Subtype.SKILL): Subtype.RULE,
    (Format.CONTINUE, Subtype.TOOL): Subtype.RULE,
    (Format.CONTINUE, Subtype.WORKFLOW): Subtype.PROMPT,
    (Format.CONTINUE, Subtype.TEMPLATE): Subtype.PROMPT,
    (Format.CONTINUE, Subtype.CHATMODE): Subtype.PROMPT,
    (Format.COPILOT, Subtype.AGENT): Subtype.CHATMODE,
    (Format.COPILOT, Subtype.SKILL): Subtype.RULE,
    (Format.COPILOT, Subtype.SLASH_COMMAND): Subtype.PROMPT,
    (Format.COPILOT, Subtype.TOOL): Subtype.RULE,
    (Format.COPILOT, Subtype.WORKFLOW): Subtype.PROMPT,
    (Format.COPILOT, Subtype.TEMPLATE): Subtype.PROMPT,
    **{
        (single_rule_format, subtype): Subtype.RULE
        for single_rule_format in (Format.KIRO, Format.AGENTS_MD, Format.RULER)
        for subtype in Subtype
        if subtype is not Subtype.RULE
    },
}

PATH_TEMPLATES: dict[tuple[Format, Subtype], str] = {
    (Format.CLAUDE, Subtype.RULE): ".claude/rules/{name}.md",
    (Format.CLAUDE, Subtype.AGENT): ".claude/agents/{name}.md",
    (Format.CLAUDE, Subtype.SKILL): ".claude/skills/{name}/SKILL.md",
    (Format.CLAUDE, Subtype.SLASH_COMMAND): ".claude/commands/{name}.md",
    (Format.CURSOR, Subtype.RULE): ".cursor/rules/{name}.mdc",
    (Format.CURSOR, Subtype.AGENT): ".cursor/agents/{name}.mdc",
    (Format.CURSOR, Subtype.SLASH_COMMAND): ".cursor/commands/{name}.md",
    (Format.WINDSURF, Subtype.RULE): ".windsurf/rules/{name}.md",
    (Format.WINDSURF, Subtype.WORKFLOW): ".windsurf/workflows/{name}.md",
    (Format.CONTINUE, Subtype.RULE): ".continue/rules/{name}.json",
    (Format.CONTINUE, Subtype.PROMPT): ".continue/prompts/{name}.json",
    (Format.CONTINUE, Subtype.SLASH_COMMAND): ".continue/prompts/{name}.json",
    (Format.COPILOT, Subtype.RULE): ".github/instructions/{name}.instructions.md",
    (Format.COPILOT, Subtype.CHATMODE): ".github/chatmodes/{name}.chatmode.md",
    (Format.COPILOT, Subtype.PROMPT): ".github/prompts/{name}.prompt.md",
    (Format.KIRO, Subtype.RULE): ".kiro/steering/{name}.md",
    (Format.AGENTS_MD, Subtype.RULE): "agents.md",
    (Format.RULER, Subtype.RULE): ".ruler/{name}.md",
}

COPILOT_REPOSITORY_WIDE_PATH = ".github/copilot-instructions.md"


@dataclass(frozen=True)
class SubtypeResolution:
    """Outcome of mapping a requested subtype onto a target format."""

    requested: Subtype
    subtype: Subtype
    substitution: SubtypeSubstitutedWarning | None = None

    @property
    def substituted(self) -> bool:
        return self.substitution is not None


@dataclass(frozen=True)
class InstallTarget:
    """Resolved output location for a converted package."""

    path: Path
    subtype: Subtype
    substitution: SubtypeSubstitutedWarning | None = None


def resolve_subtype(format: Format | str, subtype: str) -> SubtypeResolution:
    """
    Map a canonical subtype onto the subtypes a format can represent.

    Unrecognized subtype strings are treated as ``rule``. Substitutions are
    recorded on the result, never raised.

    Args:
        format: Target format
        subtype: Requested canonical subtype

    Returns:
        SubtypeResolution with the effective subtype

    Example:
        >>> resolution = resolve_subtype("cursor", "skill")
        >>> resolution.subtype, resolution.substituted
        (<Subtype.RULE: 'rule'>, True)
    """
    target = coerce_format(format)
    requested = normalize_subtype(subtype)
    if requested in SUPPORTED_SUBTYPES[target]:
        return SubtypeResolution(requested=requested, subtype=requested)

    substitute = SUBTYPE_SUBSTITUTIONS[(target, requested)]
    return SubtypeResolution(
        requested=requested,
        subtype=substitute,
        substitution=SubtypeSubstitutedWarning(target.value, requested.value, substitute.value),
    )


def template_pattern(template: str) -> re.Pattern[str]:
    """Compile a path template into a regex matching the end of a POSIX path.

    The ``{name}`` placeholder becomes the named group ``name``.
    """
    escaped = re.escape(template).replace(re.escape("{name}"), r"(?P<name>[^/]+)")
    return re.compile(rf"(?:^|/){escaped}$")


class FormatResolver:
    """
    Resolve subtypes and install paths for converted packages (with injected project root).

    This class implements the decision-table lookup. Apps inject POLICY (the
    project root all templates are relative to).

    Philosophy:
    - Constant tables keyed by (format, subtype), exhaustively testable
    - Explicit caller paths always win
    - Substitutions are surfaced, never silent
    """

    def __init__(self, project_root: Path | None = None):
        """Initialize resolver with the app-provided project root.

        Args:
            project_root: Directory templates are resolved against (defaults to cwd)

        Example:
            >>> resolver = FormatResolver(project_root=Path("/work/my-app"))
        """
        self.project_root = project_root if project_root is not None else Path.cwd()

    def resolve_subtype(self, format: Format | str, subtype: str) -> SubtypeResolution:
        """Instance alias for module-level resolve_subtype()."""
        return resolve_subtype(format, subtype)

    def template_for(self, format: Format | str, subtype: str) -> str:
        """Return the path template for a format, after subtype substitution."""
        target = coerce_format(format)
        resolution = resolve_subtype(target, subtype)
        return PATH_TEMPLATES[(target, resolution.subtype)]

    def resolve_path(
        self,
        format: Format | str,
        subtype: str,
        name: str,
        *,
        output_path: Path | str | None = None,
        name_override: str | None = None,
        repository_wide: bool = False,
    ) -> InstallTarget:
        """
        Resolve the file a converted package should be written to.

        Resolution order:
        1. Explicit output path (relative paths are taken from project root)
        2. Copilot repository-wide file when requested for a Copilot rule
        3. Path template for (format, effective subtype)

        A name override replaces the filename part of the template only; the
        directory part is always built from the package's own name.

        Args:
            format: Target format
            subtype: Requested canonical subtype
            name: Package name (sanitized before use)
            output_path: Explicit destination, overrides the template
            name_override: Replacement for the filename portion
            repository_wide: Use Copilot's single repository-wide file

        Returns:
            InstallTarget with absolute-or-root-relative path and effective subtype
        """
        target = coerce_format(format)
        resolution = resolve_subtype(target, subtype)

        if output_path is not None:
            path = Path(output_path)
            if not path.is_absolute():
                path = self.project_root / path
            logger.debug(f"Using explicit output path for {name}: {path}")
            return InstallTarget(path=path, subtype=resolution.subtype, substitution=resolution.substitution)

        if repository_wide and target is Format.COPILOT and resolution.subtype is Subtype.RULE:
            template = COPILOT_REPOSITORY_WIDE_PATH
        else:
            template = PATH_TEMPLATES[(target, resolution.subtype)]

        safe_name = sanitize_name(name)
        file_name = sanitize_name(name_override) if name_override else safe_name

        template_path = PurePosixPath(template)
        directory = str(template_path.parent).format(name=safe_name)
        filename = template_path.name.format(name=file_name)

        path = self.project_root / directory / filename if directory != "." else self.project_root / filename
        if resolution.substituted:
            logger.debug(f"{resolution.substitution}")
        logger.debug(f"Resolved {target.value}/{resolution.subtype.value} path for {name}: {path}")
        return InstallTarget(path=path, subtype=resolution.subtype, substitution=resolution.substitution)
