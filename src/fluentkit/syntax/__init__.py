"""Fluent syntax package.

Provides parser, AST definitions, visitor pattern, and serialization.
Separate from runtime to enable tooling (linters, formatters, IDE plugins).

Python 3.13+.
"""

from .ast import (
    Annotation,
    Attribute,
    CallArguments,
    Comment,
    Entry,
    Expression,
    FunctionReference,
    Identifier,
    InlineExpression,
    Junk,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
    PatternElement,
    Placeable,
    Resource,
    SelectExpression,
    Span,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
    VariantKey,
)
from .dump import to_dict
from .parser import FluentParser, parse
from .scanner import Scanner
from .serializer import FluentSerializer, SerializationValidationError, serialize
from .visitor import ASTTransformer, ASTVisitor, iter_children, rename_entry

__all__ = [
    "ASTTransformer",
    "ASTVisitor",
    "Annotation",
    "Attribute",
    "CallArguments",
    "Comment",
    "Entry",
    "Expression",
    "FluentParser",
    "FluentSerializer",
    "FunctionReference",
    "Identifier",
    "InlineExpression",
    "Junk",
    "Message",
    "MessageReference",
    "NamedArgument",
    "NumberLiteral",
    "Pattern",
    "PatternElement",
    "Placeable",
    "Resource",
    "Scanner",
    "SelectExpression",
    "SerializationValidationError",
    "Span",
    "StringLiteral",
    "Term",
    "TermReference",
    "TextElement",
    "VariableReference",
    "Variant",
    "VariantKey",
    "iter_children",
    "parse",
    "rename_entry",
    "serialize",
    "to_dict",
]
