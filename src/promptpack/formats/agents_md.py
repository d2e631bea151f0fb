"""agents.md adapter - plain markdown, metadata comes from the seed only."""

from ..resolver import resolve_subtype
from ..schema import CanonicalPackage
from ..schema import Format
from ..schema import FormatOptions
from ..schema import SeedMetadata
from ..utils import ensure_content
from ._base import ConversionResult
from ._base import FormatAdapter
from ._base import build_package
from ._base import coerce_seed
from ._base import detect_subtype
from ._base import frontmatter_document
from ._base import make_result


def from_agents_md(content: str, seed: SeedMetadata | dict | None = None) -> CanonicalPackage:
    """Parse an agents.md file: first ``#`` heading is the title, the rest is body.

    Raises:
        EmptyDocumentError: If content is blank
    """
    text = ensure_content(content, Format.AGENTS_MD.value)
    seed = coerce_seed(seed)
    return build_package(
        format=Format.AGENTS_MD,
        seed=seed,
        subtype=detect_subtype({}, seed),
        body=text,
    )


def to_agents_md(pkg: CanonicalPackage, options: FormatOptions | dict | None = None) -> ConversionResult:
    resolution = resolve_subtype(Format.AGENTS_MD, pkg.subtype)
    content = frontmatter_document(pkg, None)
    return make_result(pkg, Format.AGENTS_MD, content, resolution, ())


ADAPTER = FormatAdapter(
    format=Format.AGENTS_MD,
    parse=from_agents_md,
    serialize=to_agents_md,
    fields=(),
    envelope="markdown",
)
