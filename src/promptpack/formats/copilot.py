"""GitHub Copilot adapter - instructions, chat modes and prompt files.

Repository-wide instructions are plain markdown. Path-specific instructions
carry an ``applyTo`` header; chat modes and prompt files carry
description/tools/model.
"""

from typing import Any

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..schema import Subtype
from ..utils import coerce_str
from ..utils import split_list
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import coerce_options
from ._base import frontmatter_document
from ._base import make_result
from ._base import parse_frontmatter_document
from ._base import with_extra


def _join_globs(globs: list[str]) -> str:
    return ",".join(globs)


COPILOT_FIELDS = (
    FieldSpec("applyTo", "globs", split_list, _join_globs),
    FieldSpec("description", "description", coerce_str),
    FieldSpec("tools", "allowed_tools", split_list, list),
    FieldSpec("model", "model", coerce_str),
)

INSTRUCTION_ATTRIBUTES = ("globs", "description")
CHAT_ATTRIBUTES = ("description", "allowed_tools", "model")

# Chat mode marker written when a chat mode has no tools
CHATMODE_MODE = "agent"


def _chatmode_hint(meta: dict[str, Any]) -> Subtype | None:
    if "applyTo" not in meta and ("tools" in meta or "mode" in meta):
        return Subtype.CHATMODE
    return None


def from_copilot(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """
    Parse a Copilot instructions, chat mode or prompt file.

    A header declaring ``tools`` or ``mode`` without ``applyTo`` marks a chat
    mode. Prompt files are told apart by their path, so callers pass
    ``subtype="prompt"`` in the seed for them.
    """
    return parse_frontmatter_document(
        content,
        seed,
        format=Format.COPILOT,
        fields=COPILOT_FIELDS,
        subtype_hint=_chatmode_hint,
    )


def to_copilot(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as Copilot markdown.

    Instructions get an ``applyTo`` header when ``options.copilot_config.apply_to``
    or the package globs give one; without any header field the output is
    plain markdown suitable for ``.github/copilot-instructions.md``.

    Chat modes without tools carry ``mode: agent`` so the header still
    identifies them.
    """
    config = coerce_options(options).copilot_config
    resolution = resolve_subtype(Format.COPILOT, pkg.subtype)
    attributes = pkg.attributes

    header: dict[str, Any] = {}
    if resolution.subtype is Subtype.RULE:
        apply_to = (config.apply_to if config else None) or attributes.globs
        if apply_to:
            header["applyTo"] = _join_globs(apply_to)
        if attributes.description:
            header["description"] = attributes.description
        represented = INSTRUCTION_ATTRIBUTES
    else:
        if attributes.description:
            header["description"] = attributes.description
        if attributes.allowed_tools:
            header["tools"] = list(attributes.allowed_tools)
        if attributes.model:
            header["model"] = attributes.model
        if resolution.subtype is Subtype.CHATMODE and "tools" not in header:
            header["mode"] = CHATMODE_MODE
        represented = CHAT_ATTRIBUTES

    header = with_extra(header, pkg, Format.COPILOT)
    content = frontmatter_document(pkg, header or None)
    return make_result(pkg, Format.COPILOT, content, resolution, represented)


ADAPTER = FormatAdapter(
    format=Format.COPILOT,
    parse=from_copilot,
    serialize=to_copilot,
    fields=COPILOT_FIELDS,
    envelope="optional-frontmatter",
)
