"""Conversion between mdast JSON and document tree nodes."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import SerializationError
from .nodes import Code, Link, Node, Parent, Text


def node_from_dict(raw: object) -> Node:
    """Build a document tree from an mdast mapping.

    ``link``, ``text`` and ``code`` nodes get their dedicated classes; any other
    mapping with a ``children`` list becomes a `Parent`, everything else a plain
    `Node`. Unrecognized fields are preserved in ``data``.

    Args:
        raw: Decoded mdast node.

    Returns:
        Node: Root of the converted tree.

    Raises:
        SerializationError: If a node is not a mapping, lacks a string ``type``,
            or has children that are not a list.

    Examples:
        node_from_dict({"type": "root", "children": []})
    """
    if not isinstance(raw, dict):
        raise SerializationError(f"Expected an mdast node object, got {type(raw).__name__}")

    node_type = raw.get("type")
    if not isinstance(node_type, str):
        raise SerializationError("mdast node is missing a string `type`")

    data = {key: value for key, value in raw.items() if key not in ("type", "children")}

    if node_type == "text":
        value = data.pop("value", "")
        return Text(value=_expect_str(value, "text.value"), data=data)

    if node_type == "code":
        return Code(
            lang=data.pop("lang", None),
            meta=data.pop("meta", None),
            value=_expect_str(data.pop("value", ""), "code.value"),
            data=data,
        )

    children = _children_from_raw(raw)

    if node_type == "link":
        return Link(
            url=_expect_str(data.pop("url", ""), "link.url"),
            title=data.pop("title", None),
            children=children if children is not None else [],
            data=data,
        )

    if children is not None:
        return Parent(type=node_type, data=data, children=children)

    return Node(type=node_type, data=data)


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a document tree back into an mdast mapping.

    Args:
        node: Root of the tree to convert.

    Returns:
        dict[str, Any]: JSON-compatible mdast node.
    """
    result: dict[str, Any] = {"type": node.type}

    if isinstance(node, Text):
        result["value"] = node.value
    elif isinstance(node, Code):
        result["lang"] = node.lang
        result["meta"] = node.meta
        result["value"] = node.value
    elif isinstance(node, Link):
        result["url"] = node.url
        result["title"] = node.title

    result.update(node.data)

    if isinstance(node, Parent):
        result["children"] = [node_to_dict(child) for child in node.children]

    return result


def loads(text: str) -> Node:
    """Parse an mdast JSON document into a tree.

    Raises:
        SerializationError: If the text is not valid JSON or not a valid tree.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as error:
        raise SerializationError(f"Invalid JSON: {error}") from error
    return node_from_dict(raw)


def dumps(node: Node, indent: int | None = 2) -> str:
    return json.dumps(node_to_dict(node), indent=indent, ensure_ascii=False)


def _children_from_raw(raw: dict[str, Any]) -> list[Node] | None:
    if "children" not in raw:
        return None
    children = raw["children"]
    if not isinstance(children, list):
        raise SerializationError(f"`children` of a {raw['type']} node must be a list")
    return [node_from_dict(child) for child in children]


def _expect_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise SerializationError(f"`{field_name}` must be a string")
    return value
