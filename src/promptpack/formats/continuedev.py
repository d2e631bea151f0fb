"""Continue adapter - JSON rule and prompt documents.

Module is named ``continuedev`` because ``continue`` is a Python keyword.
"""

import json
from typing import Any

from ..exceptions import MalformedDocumentError
from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..schema import Subtype
from ..utils import coerce_bool
from ..utils import coerce_str
from ..utils import ensure_content
from ..utils import join_title
from ..utils import split_list
from ._base import ConversionResult
from ._base import FieldSpec
from ._base import FormatAdapter
from ._base import build_package
from ._base import coerce_seed
from ._base import detect_subtype
from ._base import make_result
from ._base import origin_extra
from ._base import read_fields

CONTINUE_FIELDS = (
    FieldSpec("name", "name", coerce_str),
    FieldSpec("description", "description", coerce_str),
    FieldSpec("globs", "globs", split_list),
    FieldSpec("alwaysApply", "always_apply", coerce_bool),
)

# Keys that may hold the markdown body, in lookup order
BODY_KEYS = ("prompt", "rules", "content")

RULE_ATTRIBUTES = ("description", "globs", "always_apply")
PROMPT_ATTRIBUTES = ("description",)


def _read_body(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return "\n\n".join(item.strip() for item in value if item.strip())
    raise MalformedDocumentError(
        f"Continue '{key}' must be a string or a list of strings, got {type(value).__name__}",
        context={"format": Format.CONTINUE.value, "key": key},
    )


def _subtype_hint(data: dict[str, Any]) -> Subtype | None:
    if data.get("invokable") is True:
        return Subtype.SLASH_COMMAND
    if "prompt" in data:
        return Subtype.PROMPT
    return None


def from_continue(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """
    Parse a Continue JSON document.

    The body comes from the first of ``prompt``, ``rules`` or ``content``;
    other body keys are kept in extra. ``invokable: true`` marks a slash
    command, a ``prompt`` body marks a prompt.

    Raises:
        EmptyDocumentError: If content is blank
        MalformedDocumentError: If the JSON is invalid, is not an object, or
            the body key holds something other than text
    """
    text = ensure_content(content, Format.CONTINUE.value)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(
            f"Continue document is not valid JSON: {e}",
            context={"format": Format.CONTINUE.value},
        ) from e
    if not isinstance(data, dict):
        raise MalformedDocumentError(
            f"Continue document must be a JSON object, got {type(data).__name__}",
            context={"format": Format.CONTINUE.value},
        )

    body_key = next((key for key in BODY_KEYS if key in data), None)
    body = _read_body(body_key, data[body_key]) if body_key else ""

    reserved = [body_key] if body_key else []
    if data.get("invokable") is True:
        reserved.append("invokable")
    values, extra = read_fields(data, CONTINUE_FIELDS, reserved=reserved)

    seed = coerce_seed(seed)
    return build_package(
        format=Format.CONTINUE,
        seed=seed,
        subtype=detect_subtype(data, seed, _subtype_hint(data)),
        body=body,
        values=values,
        extra=extra,
    )


def to_continue(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    """
    Serialize a package as Continue JSON.

    Prompts and slash commands become ``{name, description, invokable, prompt}``
    (``invokable`` only for slash commands); everything else becomes
    ``{name, description, globs, alwaysApply, rules}``.
    """
    resolution = resolve_subtype(Format.CONTINUE, pkg.subtype)
    attributes = pkg.attributes
    markdown = join_title(pkg.title, pkg.body)

    document: dict[str, Any] = {"name": pkg.name}
    if attributes.description:
        document["description"] = attributes.description

    if resolution.subtype in (Subtype.PROMPT, Subtype.SLASH_COMMAND):
        if resolution.subtype is Subtype.SLASH_COMMAND:
            document["invokable"] = True
        document["prompt"] = markdown
        represented = PROMPT_ATTRIBUTES
    else:
        if attributes.globs:
            document["globs"] = list(attributes.globs)
        if attributes.always_apply is not None:
            document["alwaysApply"] = attributes.always_apply
        document["rules"] = markdown
        represented = RULE_ATTRIBUTES

    for key, value in origin_extra(pkg, Format.CONTINUE).items():
        document.setdefault(key, value)

    content = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return make_result(pkg, Format.CONTINUE, content, resolution, represented)


ADAPTER = FormatAdapter(
    format=Format.CONTINUE,
    parse=from_continue,
    serialize=to_continue,
    fields=CONTINUE_FIELDS,
    envelope="json",
)
