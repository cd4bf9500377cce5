"""Tests for document tree building."""

import pytest

from xml_compare.events import XMLEventSource
from xml_compare.shared.errors import ComparisonIOError, ComparisonParseError
from xml_compare.tree import DocumentTreeBuilder, ElementNode, build_tree, parse_element


class TestElementNode:
    """Test ElementNode behavior."""

    def test_basic_element_creation(self) -> None:
        element = ElementNode("root", {"id": "1"})

        assert element.name == "root"
        assert element.attributes == {"id": "1"}
        assert element.children == []
        assert element.text == ""

    def test_empty_name_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Element name cannot be empty"):
            ElementNode("")

    def test_add_child_rejects_non_elements(self) -> None:
        element = ElementNode("root")

        with pytest.raises(TypeError, match="Child must be an ElementNode instance"):
            element.add_child("child")  # type: ignore[arg-type]

    def test_find_children(self) -> None:
        root = ElementNode("root")
        for name in ["item", "other", "item"]:
            root.add_child(ElementNode(name))

        assert len(root.find_children("item")) == 2
        assert root.find_children("missing") == []

    def test_iter_is_document_order(self) -> None:
        root = ElementNode("a")
        b = ElementNode("b")
        b.add_child(ElementNode("c"))
        root.add_child(b)
        root.add_child(ElementNode("d"))

        assert [node.name for node in root.iter()] == ["a", "b", "c", "d"]
        assert root.subtree_size == 4

    def test_equality_ignores_child_order(self) -> None:
        first = ElementNode("r", children=[ElementNode("a"), ElementNode("b")])
        second = ElementNode("r", children=[ElementNode("b"), ElementNode("a")])

        assert first == second
        assert hash(first) == hash(second)
        assert first != ElementNode("r", children=[ElementNode("a")])

    def test_equality_with_other_types(self) -> None:
        assert ElementNode("r") != "r"

    def test_to_dict_omits_empty_parts(self) -> None:
        root = ElementNode("r", {"k": "v"}, [ElementNode("leaf", text="x")])

        assert root.to_dict() == {
            "name": "r",
            "attributes": {"k": "v"},
            "children": [{"name": "leaf", "text": "x"}],
        }


class TestTreeBuilding:
    """Test materializing files into trees."""

    def test_nested_structure(self, write_xml) -> None:
        path = write_xml(
            "a.xml",
            '<?xml version="1.0"?>\n'
            '<catalog>\n'
            '  <book id="bk101"><title>Guide</title></book>\n'
            '  <book id="bk102"><title>Rain</title></book>\n'
            '</catalog>\n',
        )

        roots = build_tree(path)

        assert len(roots) == 1
        catalog = roots[0]
        assert catalog.name == "catalog"
        assert catalog.text == ""
        assert [book.attributes["id"] for book in catalog.children] == ["bk101", "bk102"]
        assert catalog.children[1].children[0].text == "Rain"

    def test_text_is_own_trimmed_segments(self, write_xml) -> None:
        """Test that text around child elements is trimmed and concatenated."""
        path = write_xml("a.xml", "<p>hello <b>x</b> world</p>")

        paragraph = build_tree(path)[0]

        assert paragraph.text == "helloworld"
        assert paragraph.children[0].text == "x"

    def test_namespaced_attributes_reduced_to_local_names(self, write_xml) -> None:
        """Test that attributes sharing a local name keep the later value."""
        path = write_xml(
            "a.xml", '<r xmlns:p="urn:p" xmlns:q="urn:q" p:id="1" q:id="2"/>'
        )

        root = build_tree(path)[0]

        assert root.attributes == {"id": "2"}

    def test_deep_nesting_built_without_recursion(self, write_xml) -> None:
        depth = 200
        path = write_xml("deep.xml", "<n>" * depth + "leaf" + "</n>" * depth)

        root = build_tree(path)[0]

        node = root
        levels = 1
        while node.children:
            node = node.children[0]
            levels += 1
        assert levels == depth
        assert node.text == "leaf"
        assert root.subtree_size == depth

    def test_builder_class(self, write_xml) -> None:
        path = write_xml("a.xml", "<r><a/><b/></r>")

        builder = DocumentTreeBuilder(correlation_id="tree-test")

        assert builder.build(path)[0].subtree_size == 3

    def test_parse_element_consumes_through_end_tag(self, write_xml) -> None:
        path = write_xml("a.xml", "<r><a>1</a><b>2</b></r>")

        with XMLEventSource(path) as source:
            source.next_event()  # StartDocument
            source.next_event()  # <r>
            source.next_event()  # empty text before <a>
            element = parse_element(source.next_event(), source)
            remaining = list(source)

        assert element == ElementNode("a", text="1")
        assert remaining[1].local_name == "b"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ComparisonIOError):
            build_tree(tmp_path / "missing.xml")

    def test_malformed_file(self, write_xml) -> None:
        path = write_xml("bad.xml", "<r><a></b></r>")

        with pytest.raises(ComparisonParseError):
            build_tree(path)
