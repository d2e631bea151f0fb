"""Canonical package model - The pivot every format converts through.

Per KERNEL_PHILOSOPHY: Formats are policy, the canonical model is mechanism.
Per AGENTS.md: Ruthless simplicity - a small set of well-known attributes plus
one explicit map for everything else.
"""

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator
from pydantic.alias_generators import to_camel

from .exceptions import UnsupportedFormatError
from .utils import normalize_body
from .utils import split_list
from .utils import split_title


class Format(StrEnum):
    """Supported on-disk formats."""

    CLAUDE = "claude"
    CURSOR = "cursor"
    WINDSURF = "windsurf"
    CONTINUE = "continue"
    COPILOT = "copilot"
    KIRO = "kiro"
    AGENTS_MD = "agents.md"
    RULER = "ruler"


class Subtype(StrEnum):
    """Functional category of an artifact, independent of its format."""

    RULE = "rule"
    AGENT = "agent"
    SKILL = "skill"
    SLASH_COMMAND = "slash-command"
    TOOL = "tool"
    PROMPT = "prompt"
    WORKFLOW = "workflow"
    TEMPLATE = "template"
    CHATMODE = "chatmode"


class Inclusion(StrEnum):
    """When a steering rule is loaded into context."""

    ALWAYS = "always"
    MANUAL = "manual"
    FILE_MATCH = "fileMatch"


DEFAULT_SUBTYPE = Subtype.RULE

_FORMAT_ALIASES = {
    "agentsmd": Format.AGENTS_MD,
    "agents-md": Format.AGENTS_MD,
    "agents_md": Format.AGENTS_MD,
    "agents": Format.AGENTS_MD,
    "claude-code": Format.CLAUDE,
    "github-copilot": Format.COPILOT,
}


def coerce_format(value: Format | str) -> Format:
    """Resolve a format identifier, accepting common spellings.

    Raises:
        UnsupportedFormatError: If the identifier names no known format
    """
    if isinstance(value, Format):
        return value
    key = str(value).strip().lower()
    try:
        return Format(key)
    except ValueError:
        pass
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    raise UnsupportedFormatError(
        f"Unsupported format '{value}'. Supported formats: {', '.join(f.value for f in Format)}",
        context={"format": str(value)},
    )


_SUBTYPE_ALIASES = {
    "command": Subtype.SLASH_COMMAND,
    "commands": Subtype.SLASH_COMMAND,
    "slash_command": Subtype.SLASH_COMMAND,
    "slashcommand": Subtype.SLASH_COMMAND,
    "rules": Subtype.RULE,
    "instructions": Subtype.RULE,
    "steering": Subtype.RULE,
    "agents": Subtype.AGENT,
    "subagent": Subtype.AGENT,
    "skills": Subtype.SKILL,
    "chat-mode": Subtype.CHATMODE,
    "chat_mode": Subtype.CHATMODE,
    "prompts": Subtype.PROMPT,
    "workflows": Subtype.WORKFLOW,
    "tools": Subtype.TOOL,
    "templates": Subtype.TEMPLATE,
}


def coerce_subtype(value: Any) -> Subtype | None:
    """Map a free-form subtype string onto the closed enumeration.

    Returns:
        Matching Subtype, or None if the value is not recognizable
    """
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    try:
        return Subtype(key)
    except ValueError:
        return _SUBTYPE_ALIASES.get(key)


def normalize_subtype(value: Any) -> Subtype:
    """Like coerce_subtype but falls back to ``rule`` for anything unknown."""
    return coerce_subtype(value) or DEFAULT_SUBTYPE


class PackageAttributes(BaseModel):
    """Format-specific optional fields that have cross-format equivalents.

    Field names are snake_case in Python; the camelCase aliases
    (``alwaysApply``, ``allowedTools``) are the canonical external keys.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    description: str | None = None
    globs: list[str] | None = None
    always_apply: bool | None = None
    allowed_tools: list[str] | None = None
    model: str | None = None
    inclusion: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return only the attributes that are set, keyed by canonical name."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SeedMetadata(BaseModel):
    """Caller-supplied publish-time metadata handed to every parser."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    version: str = "1.0.0"
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    # Explicit subtype hint, wins over markers found in the document
    subtype: str | None = None


class CanonicalPackage(BaseModel):
    """Format-neutral representation of one configuration document (immutable).

    Constructed fresh per conversion call and never mutated afterwards.
    ``title`` and ``body`` are normalized on construction: a body that starts
    with a level-1 heading while no title is given has that heading hoisted
    into ``title``, and surrounding blank lines are removed.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    version: str = "1.0.0"
    author: str = ""
    tags: list[str] = Field(default_factory=list)

    format: Format | None = None
    subtype: str = DEFAULT_SUBTYPE

    title: str | None = None
    body: str = ""

    attributes: PackageAttributes = Field(default_factory=PackageAttributes)
    extra: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _normalize_content(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        body = normalize_body(data.get("body") or "")
        title = data.get("title")
        if isinstance(title, str):
            title = title.strip() or None
        if title is None:
            title, body = split_title(body)
        data["title"] = title
        data["body"] = body
        return data

    @property
    def description(self) -> str:
        return self.attributes.description or ""

    @property
    def is_empty(self) -> bool:
        """True when there is neither a title nor a body."""
        return not self.title and not self.body


_INCLUSION_VALUES = {i.value for i in Inclusion}
_SUBTYPE_VALUES = {s.value for s in Subtype}


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def validate(pkg: CanonicalPackage) -> list[str]:
    """
    Check a package against the canonical invariants.

    Never raises; callers decide whether violations are fatal. Parsers keep
    unexpected native values (e.g. an unknown Kiro inclusion mode) instead of
    failing, so parsed packages can carry violations too.

    Args:
        pkg: Package to check

    Returns:
        List of human-readable violations (empty when valid)

    Example:
        >>> validate(pkg)
        []
    """
    violations: list[str] = []

    if not pkg.id:
        violations.append("id must not be empty")
    if not pkg.name:
        violations.append("name must not be empty")

    if pkg.subtype not in _SUBTYPE_VALUES:
        violations.append(
            f"subtype '{pkg.subtype}' is not one of: {', '.join(sorted(_SUBTYPE_VALUES))}"
        )

    attributes = pkg.attributes
    if attributes.globs is not None and not _is_string_list(attributes.globs):
        violations.append("globs must be an array of strings")
    if attributes.allowed_tools is not None and not _is_string_list(attributes.allowed_tools):
        violations.append("allowedTools must be an array of strings")
    if attributes.always_apply is not None and not isinstance(attributes.always_apply, bool):
        violations.append("alwaysApply must be a boolean")
    if attributes.inclusion is not None and attributes.inclusion not in _INCLUSION_VALUES:
        violations.append(
            f"inclusion '{attributes.inclusion}' is not one of: {', '.join(sorted(_INCLUSION_VALUES))}"
        )

    if pkg.body and re.match(r"^---[ \t]*$", pkg.body.split("\n", 1)[0]):
        violations.append("body starts with a frontmatter delimiter")

    return violations


class KiroConfig(BaseModel):
    """Kiro serializer options."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    inclusion: Inclusion | None = None
    file_match_pattern: str | None = None


class CopilotConfig(BaseModel):
    """Copilot serializer options."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    apply_to: list[str] | None = None

    @field_validator("apply_to", mode="before")
    @classmethod
    def _split_apply_to(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_list(value)
        return value


class FormatOptions(BaseModel):
    """Optional per-format serializer settings.

    Accepts the camelCase spelling as well:
    ``FormatOptions.model_validate({"kiroConfig": {"inclusion": "manual"}})``.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    kiro_config: KiroConfig | None = None
    copilot_config: CopilotConfig | None = None
