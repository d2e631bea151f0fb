"""Conversion-specific exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.
Parse errors are always attributable to a single input document.
"""


class PromptPackError(Exception):
    """Base exception for promptpack operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (format, path, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class DocumentError(PromptPackError):
    """Input document could not be parsed."""


class EmptyDocumentError(DocumentError):
    """Input document is empty or whitespace only."""


class MalformedDocumentError(DocumentError):
    """Input document is structurally invalid (e.g. broken JSON)."""


class MalformedFrontmatterError(MalformedDocumentError):
    """Frontmatter block is unterminated or not valid YAML."""


class UnsupportedFormatError(PromptPackError):
    """Unknown format identifier passed to the dispatch layer."""


class InstallError(PromptPackError):
    """Writing or recording a converted package failed."""


class SubtypeSubstitutedWarning(UserWarning):
    """A subtype was replaced by its nearest equivalent in the target format.

    Returned to the caller as data, never raised by the engine. Callers that
    want Python's warning machinery can pass it to ``warnings.warn``.
    """

    def __init__(self, target: str, requested: str, substituted: str):
        super().__init__(f"{target} has no '{requested}' subtype; using '{substituted}' instead")
        self.target = target
        self.requested = requested
        self.substituted = substituted
