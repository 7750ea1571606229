"""Visitor pattern for AST traversal.

Enables tools to traverse and transform Fluent AST without modifying node classes.

NOTE: This module follows Python stdlib ast.NodeVisitor naming convention.
Methods are named visit_NodeName (PascalCase) rather than visit_node_name (snake_case).

The set of node types is closed: :func:`iter_children` and
:meth:`ASTTransformer.generic_visit` match every node type explicitly and
end in ``assert_never``, so a new node type fails type checking until both
handle it.

Type Parameters:
- ASTVisitor[T] is generic over return type T
- ASTVisitor (no type param) defaults to T=ASTNode
- ASTTransformer uses extended return type: ASTNode | None | list[ASTNode]

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import ClassVar, assert_never

from fluentkit.constants import MAX_DEPTH
from fluentkit.core.depth_guard import DepthGuard
from fluentkit.syntax.ast import (
    Annotation,
    ASTNode,
    Attribute,
    CallArguments,
    Comment,
    FunctionReference,
    Identifier,
    Junk,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
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
)

__all__ = ["ASTTransformer", "ASTVisitor", "iter_children", "rename_entry"]

type TransformerResult = ASTNode | None | list[ASTNode]


def iter_children(node: ASTNode) -> tuple[ASTNode, ...]:
    """Return the direct child nodes of ``node`` in source order.

    Spans are not children. Identifiers are.
    """
    match node:
        case Resource():
            return node.entries
        case Message():
            value = (node.value,) if node.value is not None else ()
            comment = (node.comment,) if node.comment is not None else ()
            return (*comment, node.id, *value, *node.attributes)
        case Term():
            comment = (node.comment,) if node.comment is not None else ()
            return (*comment, node.id, node.value, *node.attributes)
        case Attribute():
            return (node.id, node.value)
        case Junk():
            return node.annotations
        case Pattern():
            return node.elements
        case Placeable():
            return (node.expression,)
        case SelectExpression():
            return (node.selector, *node.variants)
        case Variant():
            return (node.key, node.value)
        case VariableReference():
            return (node.id,)
        case MessageReference():
            attribute = (node.attribute,) if node.attribute is not None else ()
            return (node.id, *attribute)
        case TermReference():
            attribute = (node.attribute,) if node.attribute is not None else ()
            arguments = (node.arguments,) if node.arguments is not None else ()
            return (node.id, *attribute, *arguments)
        case FunctionReference():
            return (node.id, node.arguments)
        case CallArguments():
            return (*node.positional, *node.named)
        case NamedArgument():
            return (node.name, node.value)
        case (
            Comment()
            | TextElement()
            | StringLiteral()
            | NumberLiteral()
            | Identifier()
            | Annotation()
            | Span()
        ):
            return ()
        case _ as unreachable:
            assert_never(unreachable)


class ASTVisitor[T = ASTNode]:
    """Base visitor for traversing Fluent AST.

    Follows stdlib ast.NodeVisitor convention: generic_visit() automatically
    traverses all child nodes. Override visit_NodeType methods to add custom
    behavior.

    Dispatch uses a method-name table built once per subclass in
    ``__init_subclass__``, plus a per-instance cache of bound methods.

    Example:
        >>> class CountMessagesVisitor(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_Message(self, node: Message) -> ASTNode:
        ...         self.count += 1
        ...         return self.generic_visit(node)  # Traverse children
        ...
        >>> visitor = CountMessagesVisitor()
        >>> visitor.visit(resource)
        >>> print(visitor.count)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    _class_visit_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {
            name.removeprefix("visit_"): name
            for name in dir(cls)
            if name.startswith("visit_")
        }

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__().

        Args:
            max_depth: Maximum traversal depth (default: MAX_DEPTH from constants).
        """
        self._depth_guard = DepthGuard(max_depth=max_depth if max_depth is not None else MAX_DEPTH)
        self._instance_dispatch_cache: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Visit a node, dispatching to ``visit_<ClassName>`` when defined."""
        node_type = type(node)
        method = self._instance_dispatch_cache.get(node_type)
        if method is None:
            method_name = self._class_visit_methods.get(node_type.__name__)
            method = getattr(self, method_name) if method_name else self.generic_visit
            self._instance_dispatch_cache[node_type] = method
        return method(node)

    def generic_visit(self, node: ASTNode) -> T:
        """Visit every child, then return the node itself.

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            for child in iter_children(node):
                self.visit(child)
        return node  # type: ignore[return-value]  # T defaults to ASTNode


class ASTTransformer(ASTVisitor[TransformerResult]):
    """AST transformer producing a new tree (nodes are frozen).

    Each visit method can return:
    - The modified node (replaces original)
    - None (removes node from a tuple field)
    - A list of nodes (replaces single node with multiple in a tuple field)

    Single-node fields (a message's value, a placeable's expression) must
    receive exactly one node; anything else raises TypeError.

    Example - Remove all comments:
        >>> class RemoveCommentsTransformer(ASTTransformer):
        ...     def visit_Comment(self, node: Comment) -> None:
        ...         return None
        ...
        >>> cleaned_resource = RemoveCommentsTransformer().transform(resource)
    """

    def transform(self, node: ASTNode) -> TransformerResult:
        """Transform an AST node or tree (main entry point)."""
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> TransformerResult:
        """Rebuild ``node`` from its transformed children.

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            match node:
                case Resource():
                    return replace(node, entries=self._transform_tuple(node.entries))
                case Message():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        value=self._transform_optional(node.value),
                        attributes=self._transform_tuple(node.attributes),
                        comment=self._transform_optional(node.comment),
                    )
                case Term():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        value=self._transform_one(node.value),
                        attributes=self._transform_tuple(node.attributes),
                        comment=self._transform_optional(node.comment),
                    )
                case Attribute():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        value=self._transform_one(node.value),
                    )
                case Pattern():
                    return replace(node, elements=self._transform_tuple(node.elements))
                case Placeable():
                    return replace(node, expression=self._transform_one(node.expression))
                case SelectExpression():
                    return replace(
                        node,
                        selector=self._transform_one(node.selector),
                        variants=self._transform_tuple(node.variants),
                    )
                case Variant():
                    return replace(
                        node,
                        key=self._transform_one(node.key),
                        value=self._transform_one(node.value),
                    )
                case VariableReference():
                    return replace(node, id=self._transform_one(node.id))
                case MessageReference():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        attribute=self._transform_optional(node.attribute),
                    )
                case TermReference():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        attribute=self._transform_optional(node.attribute),
                        arguments=self._transform_optional(node.arguments),
                    )
                case FunctionReference():
                    return replace(
                        node,
                        id=self._transform_one(node.id),
                        arguments=self._transform_one(node.arguments),
                    )
                case CallArguments():
                    return replace(
                        node,
                        positional=self._transform_tuple(node.positional),
                        named=self._transform_tuple(node.named),
                    )
                case NamedArgument():
                    return replace(
                        node,
                        name=self._transform_one(node.name),
                        value=self._transform_one(node.value),
                    )
                case (
                    Comment()
                    | Junk()
                    | TextElement()
                    | StringLiteral()
                    | NumberLiteral()
                    | Identifier()
                    | Annotation()
                    | Span()
                ):
                    return node
                case _ as unreachable:
                    assert_never(unreachable)

    def _transform_one(self, node: ASTNode) -> ASTNode:
        result = self.visit(node)
        if result is None or isinstance(result, list):
            msg = f"{type(node).__name__} in a single-node field must transform to one node"
            raise TypeError(msg)
        return result

    def _transform_optional[N](self, node: N | None) -> N | None:
        if node is None:
            return None
        return self._transform_one(node)  # type: ignore[arg-type,return-value]

    def _transform_tuple(self, nodes: tuple[ASTNode, ...]) -> tuple[ASTNode, ...]:
        """Transform a tuple of nodes, dropping None and flattening lists."""
        result: list[ASTNode] = []
        for node in nodes:
            transformed = self.visit(node)
            match transformed:
                case None:
                    continue
                case list():
                    result.extend(transformed)
                case _:
                    result.append(transformed)
        return tuple(result)


# ============================================================================
# ENTRY RENAMING
# ============================================================================


class _EntryRenamer(ASTTransformer):
    """Rename one message or term and every reference to it."""

    __slots__ = ("_is_term", "_new_name", "_old_name")

    def __init__(self, old_name: str, new_name: str, *, is_term: bool) -> None:
        super().__init__()
        self._old_name = old_name
        self._new_name = new_name
        self._is_term = is_term

    def _renamed(self, identifier: Identifier) -> Identifier:
        if identifier.name == self._old_name:
            return replace(identifier, name=self._new_name)
        return identifier

    def visit_Message(self, node: Message) -> TransformerResult:
        node = self.generic_visit(node)  # type: ignore[assignment]
        if self._is_term:
            return node
        return replace(node, id=self._renamed(node.id))

    def visit_Term(self, node: Term) -> TransformerResult:
        node = self.generic_visit(node)  # type: ignore[assignment]
        if not self._is_term:
            return node
        return replace(node, id=self._renamed(node.id))

    def visit_MessageReference(self, node: MessageReference) -> TransformerResult:
        if self._is_term:
            return node
        return replace(node, id=self._renamed(node.id))

    def visit_TermReference(self, node: TermReference) -> TransformerResult:
        node = self.generic_visit(node)  # type: ignore[assignment]
        if not self._is_term:
            return node
        return replace(node, id=self._renamed(node.id))


def rename_entry(resource: Resource, old_id: str, new_id: str) -> Resource:
    """Return a copy of ``resource`` with one entry renamed.

    The entry's own id and every reference to it (message references, or
    term references including those with attributes or arguments) are
    rewritten. Ids starting with ``-`` address terms. The input tree is
    left untouched; unchanged subtrees are shared with the result.

    Args:
        resource: Resource to rewrite
        old_id: Current id (``-name`` for a term)
        new_id: New id, with the same ``-`` prefix convention

    Raises:
        ValueError: If only one of the ids names a term

    Example:
        >>> renamed = rename_entry(parse("a = A\\nb = { a }"), "a", "c")
        >>> serialize(renamed)
        'c = A\\nb = { c }\\n'
    """
    is_term = old_id.startswith("-")
    if is_term != new_id.startswith("-"):
        msg = f"Cannot rename {old_id!r} to {new_id!r}: both must be terms or both messages"
        raise ValueError(msg)
    renamer = _EntryRenamer(old_id.removeprefix("-"), new_id.removeprefix("-"), is_term=is_term)
    return renamer.transform(resource)  # type: ignore[return-value]
