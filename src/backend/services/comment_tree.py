"""
Comment Tree Assembler

Turns the flat, newest-first comment list of a post into a reply forest.

Nodes live in an arena indexed by input position. Each node keeps the
indices of its children, so assembly needs no recursion and no object
pointers until the final materialization step. A parent reference that
cannot be resolved (unknown id, other post, deleted parent, or the comment
itself) makes the comment a root.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Protocol, Sequence, TypeVar


class CommentLike(Protocol):
    id: Any
    parent_id: Optional[Any]


C = TypeVar("C", bound=CommentLike)
N = TypeVar("N")


@dataclass
class CommentNode(Generic[C]):
    """Default tree node: the comment plus its ordered replies."""

    comment: C
    replies: list["CommentNode[C]"] = field(default_factory=list)


def _default_wrap(comment: Any) -> CommentNode:
    return CommentNode(comment=comment)


def _attach(parent: Any, child: Any) -> None:
    parent.replies.append(child)


def _link(comments: Sequence[CommentLike]) -> tuple[list[int], list[list[int]]]:
    """Compute root indices and child-index lists over the input positions."""
    index_by_id: dict[str, int] = {}
    for idx, comment in enumerate(comments):
        # First occurrence wins if an id is repeated
        index_by_id.setdefault(str(comment.id), idx)

    children: list[list[int]] = [[] for _ in comments]
    parent_of: list[Optional[int]] = [None] * len(comments)
    roots: list[int] = []

    for idx, comment in enumerate(comments):
        parent_idx = None
        if comment.parent_id is not None:
            parent_idx = index_by_id.get(str(comment.parent_id))
        if parent_idx is None or parent_idx == idx:
            roots.append(idx)
        else:
            parent_of[idx] = parent_idx
            children[parent_idx].append(idx)

    # Anything not reachable from a root sits on a parent cycle
    reachable = [False] * len(comments)
    stack = list(roots)
    while stack:
        idx = stack.pop()
        reachable[idx] = True
        stack.extend(children[idx])

    orphaned = [idx for idx, seen in enumerate(reachable) if not seen]
    if orphaned:
        for idx in orphaned:
            if reachable[idx]:
                continue
            # Cut the link into this node, then everything below it is reachable
            parent_idx = parent_of[idx]
            if parent_idx is not None:
                children[parent_idx].remove(idx)
                parent_of[idx] = None
            roots.append(idx)
            stack = [idx]
            while stack:
                cur = stack.pop()
                reachable[cur] = True
                stack.extend(children[cur])
        roots.sort()

    return roots, children


def build_comment_tree(
    comments: Sequence[C],
    wrap: Callable[[C], N] = _default_wrap,  # type: ignore[assignment]
    attach: Callable[[N, N], None] = _attach,
) -> list[N]:
    """
    Assemble comments into a list of root nodes.

    Args:
        comments: comments of one post, already in display order
            (newest first); root and sibling order follow this order
        wrap: builds a node for one comment; the node must expose a
            `replies` list unless a custom attach is given
        attach: appends a child node to its parent node

    Returns:
        Root nodes in input order, each holding its replies.
    """
    roots, children = _link(comments)
    nodes = [wrap(comment) for comment in comments]

    for idx, child_indices in enumerate(children):
        for child_idx in child_indices:
            attach(nodes[idx], nodes[child_idx])

    return [nodes[idx] for idx in roots]

