"""Discovery of marked snippet links in a document tree."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import GITHUB_BLOB_PREFIX
from .nodes import Link, Node, Parent, iter_with_parents
from .reference import SnippetReference


@dataclass(frozen=True)
class MatchRecord:
    """A located link and the slot it will be replaced in.

    Attributes:
        parent: Direct parent of the link.
        index: Position of the link in ``parent.children``.
        source_url: Link target.
        reference: Parsed reference, attached once the URL has been validated.
    """

    parent: Parent
    index: int
    source_url: str
    reference: SnippetReference | None = None


def is_snippet_link(node: Node, marker: str) -> bool:
    """Check whether a node is a link flagged for inlining.

    The label must be exactly one text node equal to `marker` and the target
    must be a GitHub URL.
    """
    return (
        isinstance(node, Link)
        and node.label == marker
        and node.url.startswith(GITHUB_BLOB_PREFIX)
    )


def locate_matches(tree: Node, marker: str) -> list[MatchRecord]:
    """Collect every snippet link of `tree` in document order.

    Args:
        tree: Root of the document tree.
        marker: Label text that flags a link.

    Returns:
        list[MatchRecord]: One record per matching link, without references.

    Examples:
        matches = locate_matches(tree, "inline")
    """
    matches = []
    for node, parent, index in iter_with_parents(tree):
        if parent is None or index is None:
            continue
        if is_snippet_link(node, marker):
            matches.append(MatchRecord(parent=parent, index=index, source_url=node.url))
    return matches
