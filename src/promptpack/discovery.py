"""Installed artifact discovery - Convention over configuration.

Finds artifacts already installed in a project by reversing the install path
templates.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (project root is policy)
- The path templates are the convention; discovery only reads them backwards

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Direct filesystem globbing, no caching
- YAGNI: Report what exists now
"""

import logging
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .resolver import COPILOT_REPOSITORY_WIDE_PATH
from .resolver import PATH_TEMPLATES
from .resolver import template_pattern
from .schema import Format
from .schema import Subtype
from .schema import coerce_format

logger = logging.getLogger(__name__)

# Files installed at fixed locations outside the per-name templates
FIXED_LOCATIONS = (
    (COPILOT_REPOSITORY_WIDE_PATH, Format.COPILOT, Subtype.RULE),
    ("AGENTS.md", Format.AGENTS_MD, Subtype.RULE),
)


class DiscoveredArtifact(BaseModel):
    """One installed artifact (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    path: Path
    format: Format
    # None when the location is shared by several subtypes
    subtype: Subtype | None
    name: str


class ProjectArtifacts(BaseModel):
    """Artifacts discovered in a project (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    artifacts: list[DiscoveredArtifact] = Field(default_factory=list)

    def has_artifacts(self) -> bool:
        """Check if any artifacts were discovered."""
        return bool(self.artifacts)

    def by_format(self, format: Format | str) -> list[DiscoveredArtifact]:
        target = coerce_format(format)
        return [a for a in self.artifacts if a.format is target]


def discover_artifacts(project_root: Path) -> ProjectArtifacts:
    """
    Discover installed artifacts in a project using the install path templates.

    Convention:
    - Every (format, subtype) path template, with ``{name}`` as a wildcard
    - ``.github/copilot-instructions.md`` and ``agents.md``/``AGENTS.md``

    Locations shared by several subtypes (Continue prompts and slash
    commands) are reported once with ``subtype=None``.

    Args:
        project_root: Project directory

    Returns:
        ProjectArtifacts sorted by path

    Example:
        >>> artifacts = discover_artifacts(Path("/work/my-app"))
        >>> [a.name for a in artifacts.by_format("cursor")]
        ['react-rules']
    """
    found: dict[Path, tuple[Format, set[Subtype], str]] = {}

    for (format, subtype), template in PATH_TEMPLATES.items():
        pattern = template_pattern(template)
        for path in project_root.glob(template.replace("{name}", "*")):
            if not path.is_file():
                continue
            match = pattern.search(path.relative_to(project_root).as_posix())
            if not match:
                continue
            name = match.groupdict().get("name") or path.stem
            entry = found.setdefault(path, (format, set(), name))
            entry[1].add(subtype)

    for location, format, subtype in FIXED_LOCATIONS:
        path = project_root / location
        if path.is_file() and path not in found:
            found[path] = (format, {subtype}, path.stem)

    artifacts = [
        DiscoveredArtifact(
            path=path,
            format=format,
            subtype=next(iter(subtypes)) if len(subtypes) == 1 else None,
            name=name,
        )
        for path, (format, subtypes, name) in sorted(found.items())
    ]
    logger.debug(f"Discovered {len(artifacts)} artifacts in {project_root}")
    return ProjectArtifacts(artifacts=artifacts)


def list_artifacts(project_root: Path, format: Format | str) -> list[str]:
    """
    List artifact names installed in a project for one format (helper).

    Args:
        project_root: Project directory
        format: Format to list

    Returns:
        List of artifact names

    Example:
        >>> list_artifacts(Path("/work/my-app"), "claude")
        ['code-reviewer', 'pdf']
    """
    return [a.name for a in discover_artifacts(project_root).by_format(format)]
