"""Generic tree-to-dict serialization of AST nodes.

Used by diagnostic and dump tooling (JSON output, snapshot tests). Every
node becomes a dict with a ``"type"`` key naming its class, followed by
its fields in declaration order. Child nodes and tuples of nodes are
expanded recursively.

Comments are named by level ("Comment", "GroupComment",
"ResourceComment") instead of carrying their ``type`` field, which
would clash with the node type key.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import fields
from decimal import Decimal
from enum import Enum
from typing import Any

from fluentkit.constants import MAX_DEPTH
from fluentkit.core.depth_guard import DepthGuard
from fluentkit.enums import CommentType
from fluentkit.syntax.ast import ASTNode, Comment, NumberLiteral

__all__ = ["to_dict"]

_COMMENT_NODE_TYPES: dict[CommentType, str] = {
    CommentType.COMMENT: "Comment",
    CommentType.GROUP: "GroupComment",
    CommentType.RESOURCE: "ResourceComment",
}


def to_dict(node: ASTNode, *, with_spans: bool = False) -> dict[str, Any]:
    """Convert an AST node into plain dicts, lists and scalars.

    Args:
        node: Any AST node
        with_spans: Include ``span`` entries (omitted by default)

    Returns:
        JSON-compatible dict. ``NumberLiteral.value`` is rendered as its
        raw source string when it is a Decimal; enum values as their string.

    Example:
        >>> to_dict(parse("a = Hi").entries[0].value)
        {'type': 'Pattern', 'elements': [{'type': 'TextElement', 'value': 'Hi'}]}
        >>> to_dict(parse("## Section").entries[0])
        {'type': 'GroupComment', 'content': 'Section'}
    """
    return _node_to_dict(node, with_spans, DepthGuard(max_depth=MAX_DEPTH * 2))


def _node_to_dict(node: Any, with_spans: bool, guard: DepthGuard) -> dict[str, Any]:
    with guard:
        if isinstance(node, Comment):
            result: dict[str, Any] = {"type": _COMMENT_NODE_TYPES[node.type]}
        else:
            result = {"type": type(node).__name__}
        for field in fields(node):
            if field.name == "span" and not with_spans:
                continue
            if isinstance(node, Comment) and field.name == "type":
                continue
            value = getattr(node, field.name)
            if isinstance(node, NumberLiteral) and field.name == "value":
                result["value"] = node.raw if isinstance(value, Decimal) else value
                continue
            result[field.name] = _value_to_dict(value, with_spans, guard)
        return result


def _value_to_dict(value: Any, with_spans: bool, guard: DepthGuard) -> Any:
    match value:
        # StrEnum members are also str; unwrap them first.
        case Enum():
            return str(value.value)
        case None | bool() | int() | str():
            return value
        case tuple():
            return [_value_to_dict(item, with_spans, guard) for item in value]
        case _ if hasattr(value, "__dataclass_fields__"):
            return _node_to_dict(value, with_spans, guard)
        case _:
            return str(value)
