from __future__ import annotations

import pytest

from inline_snippets.exceptions import SerializationError
from inline_snippets.nodes import Code, Link, Node, Parent, Text
from inline_snippets.serialization import dumps, loads, node_from_dict, node_to_dict

POSITION = {"start": {"line": 1, "column": 1, "offset": 0}, "end": {"line": 1, "column": 9}}

MDAST = {
    "type": "root",
    "children": [
        {
            "type": "paragraph",
            "children": [
                {"type": "text", "value": "See ", "position": POSITION},
                {
                    "type": "link",
                    "url": "https://github.com/o/r/blob/main/a.py#L1-L2",
                    "title": None,
                    "children": [{"type": "text", "value": "inline"}],
                },
            ],
        },
        {"type": "thematicBreak"},
        {"type": "code", "lang": "js", "meta": "title=x", "value": "let a"},
        {"type": "heading", "depth": 2, "children": [{"type": "inlineCode", "value": "x"}]},
    ],
}


def test_node_kinds_are_recognized():
    root = node_from_dict(MDAST)

    assert isinstance(root, Parent)
    paragraph, rule, code, heading = root.children
    assert isinstance(paragraph.children[0], Text)
    assert isinstance(paragraph.children[1], Link)
    assert paragraph.children[1].label == "inline"
    assert type(rule) is Node
    assert isinstance(code, Code)
    assert code.lang == "js"
    assert code.meta == "title=x"
    assert heading.data == {"depth": 2}
    assert heading.children[0].data == {"value": "x"}


def test_unknown_fields_survive_conversion():
    assert node_to_dict(node_from_dict(MDAST)) == MDAST


def test_code_node_output_shape():
    assert node_to_dict(Code(lang="go", value="x := 1")) == {
        "type": "code",
        "lang": "go",
        "meta": None,
        "value": "x := 1",
    }


def test_loads_and_dumps():
    text = dumps(Parent(type="root", children=[Text(value="café")]))

    assert "café" in text
    assert loads(text) == Parent(type="root", children=[Text(value="café")])


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"value": "no type"},
        {"type": 3},
        {"type": "root", "children": {"type": "text"}},
        {"type": "text", "value": 5},
        {"type": "link", "url": None, "children": []},
    ],
)
def test_invalid_trees_raise(raw):
    with pytest.raises(SerializationError):
        node_from_dict(raw)


def test_loads_rejects_invalid_json():
    with pytest.raises(SerializationError):
        loads("{not json")
