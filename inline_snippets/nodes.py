"""Document tree models.

The tree mirrors the mdast shape handed over by remark-style pipelines: every
node has a ``type`` tag, container nodes own an ordered ``children`` list, and
fields the transform does not interpret are kept verbatim in ``data``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Node:
    """A single node of the document tree.

    Attributes:
        type: mdast kind tag (``"paragraph"``, ``"heading"``, ...).
        data: Kind-specific fields that are carried through untouched.
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Parent(Node):
    """A node that owns an ordered sequence of children.

    The order of ``children`` is document reading order.

    Attributes:
        children: Child nodes.
    """

    children: list[Node] = field(default_factory=list)


@dataclass
class Text(Node):
    """Literal inline text.

    Attributes:
        value: Text content.
    """

    type: str = "text"
    value: str = ""


@dataclass
class Link(Parent):
    """Hyperlink whose children are its visible label.

    Attributes:
        url: Link target.
        title: Optional link title.
    """

    type: str = "link"
    url: str = ""
    title: str | None = None

    @property
    def label(self) -> str | None:
        """Return the label when it is exactly one text node, otherwise None."""
        if len(self.children) == 1 and isinstance(self.children[0], Text):
            return self.children[0].value
        return None


@dataclass
class Code(Node):
    """Fenced code block.

    Attributes:
        lang: Language tag used for highlighting; None or empty when unknown.
        meta: Extra info string after the language tag.
        value: Literal code.
    """

    type: str = "code"
    lang: str | None = None
    meta: str | None = None
    value: str = ""


def iter_with_parents(root: Node) -> Iterator[tuple[Node, Parent | None, int | None]]:
    """Walk the tree depth-first in document order.

    Yields each node exactly once together with its direct parent and its index
    in that parent's children at the time it is visited. The root is yielded
    with ``(None, None)``.

    Args:
        root: Node to start from.

    Yields:
        tuple[Node, Parent | None, int | None]: Node, parent, index.

    Examples:
        for node, parent, index in iter_with_parents(tree):
            ...
    """
    stack: list[tuple[Node, Parent | None, int | None]] = [(root, None, None)]
    while stack:
        node, parent, index = stack.pop()
        yield node, parent, index
        if isinstance(node, Parent):
            # Reversed so the first child is popped first
            for child_index in range(len(node.children) - 1, -1, -1):
                stack.append((node.children[child_index], node, child_index))
