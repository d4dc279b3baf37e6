"""
Immutable parse and encode settings.

These replace process-wide switches: every entry point takes a config object,
so two callers with different settings never interfere.
"""

from dataclasses import dataclass

from jtree._types import MAX_NESTING


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.

    strict rejects any non-whitespace content after the first complete value;
    by default such trailing content is ignored. max_nesting bounds the
    number of nested objects/arrays. allow_comments blanks out C-style
    block and line comments before parsing.
    """

    strict: bool = False
    max_nesting: int = MAX_NESTING
    allow_comments: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if not isinstance(self.allow_comments, bool):
            raise TypeError("allow_comments must be a boolean")
        if isinstance(self.max_nesting, bool) or not isinstance(
            self.max_nesting, int
        ):
            raise TypeError("max_nesting must be an integer")
        if self.max_nesting < 0:
            raise ValueError("max_nesting must be non-negative")


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON serialization with immutable settings.

    pretty switches on newlines, 4-space indentation and a space after ':'.
    escape_slashes emits '/' as '\\/' so output can be embedded in HTML.
    """

    pretty: bool = False
    escape_slashes: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.pretty, bool):
            raise TypeError("pretty must be a boolean")
        if not isinstance(self.escape_slashes, bool):
            raise TypeError("escape_slashes must be a boolean")


DEFAULT_PARSE_CONFIG = ParseConfig()
DEFAULT_ENCODE_CONFIG = EncodeConfig()
