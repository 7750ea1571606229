"""Enumerations for fluentkit type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class CommentType(StrEnum):
    """Type of FTL comment.

    StrEnum provides automatic string conversion: str(CommentType.COMMENT) == "comment"
    """

    COMMENT = "comment"
    """Standalone or attached comment: # This is a comment"""

    GROUP = "group"
    """Group comment: ## Group Title"""

    RESOURCE = "resource"
    """Resource comment: ### Resource Description"""

    @property
    def sigil(self) -> str:
        """Line prefix used in source text ("#", "##" or "###")."""
        return _COMMENT_SIGILS[self]

    @classmethod
    def from_level(cls, level: int) -> "CommentType":
        """Map a zero-based hash count (0 = "#") to its comment type."""
        return (cls.COMMENT, cls.GROUP, cls.RESOURCE)[level]


_COMMENT_SIGILS = {
    CommentType.COMMENT: "#",
    CommentType.GROUP: "##",
    CommentType.RESOURCE: "###",
}


class PluralCategory(StrEnum):
    """CLDR plural category.

    Variant keys match these values by name: [one], [few], [other].
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class FormatterKind(StrEnum):
    """Kind of locale-aware formatter held by a FormatterCache."""

    NUMBER = "number"
    """Number formatter built from NumberOptions."""

    DATETIME = "datetime"
    """Date/time formatter built from DateTimeOptions."""

    PLURAL = "plural"
    """Cardinal plural rule for a locale."""


__all__ = [
    "CommentType",
    "FormatterKind",
    "PluralCategory",
]
