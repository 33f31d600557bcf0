"""Tests for conversion between typed trees and the mapping convention."""

import pytest

from markup_tree.shared import TreeConvention
from markup_tree.tree import (
    CommentNode,
    Document,
    ElementNode,
    TextNode,
    TreeShapeError,
    document_to_tree,
    mapping_to_node,
    node_to_mapping,
    tree_to_document,
)


class TestWriting:
    """Test typed tree to mapping conversion."""

    def test_leaf_nodes(self) -> None:
        assert node_to_mapping(TextNode("x")) == {"#text": "x"}
        assert node_to_mapping(CommentNode("c")) == {"#comment": "c"}

    def test_element(self) -> None:
        element = ElementNode("item", {"id": "1"}, [TextNode("x")])

        assert node_to_mapping(element) == {"item": [{"#text": "x"}], "@id": "1"}

    def test_document(self) -> None:
        document = Document(root=ElementNode("root", children=[ElementNode("b")]))

        assert document_to_tree(document) == {"root": [{"root": [{"b": []}]}]}

    def test_custom_convention(self) -> None:
        convention = TreeConvention(attribute_prefix="$", text_key="#t", comment_key="!c")
        element = ElementNode("a", {"id": "1"}, [TextNode("x"), CommentNode("c")])

        assert node_to_mapping(element, convention) == {
            "a": [{"#t": "x"}, {"!c": "c"}],
            "$id": "1",
        }

    def test_unsupported_node(self) -> None:
        with pytest.raises(TypeError, match="Unsupported node type"):
            node_to_mapping("x")  # type: ignore[arg-type]


class TestReadingCanonicalShape:
    """Test reading the shape the parser produces."""

    def test_canonical_tree(self) -> None:
        tree = {
            "root": [{
                "root": [
                    {"#comment": "c"},
                    {"item": [{"#text": "x"}]},
                    {"#text": "tail"},
                    {"b": []},
                ],
                "@id": "7",
            }]
        }

        document = tree_to_document(tree)

        assert document.root == ElementNode(
            tag="root",
            attributes={"id": "7"},
            children=[
                CommentNode("c"),
                ElementNode("item", children=[TextNode("x")]),
                TextNode("tail"),
                ElementNode("b"),
            ],
        )
        assert document_to_tree(document) == tree

    @pytest.mark.parametrize("tree", [
        {},
        {"a": []},
        {"a": None},
        {"a": "text"},
        {"a": {"a": []}},
    ])
    def test_degenerate_trees(self, tree) -> None:
        assert tree_to_document(tree) is None
        assert tree_to_document(tree, strict=False) is None


class TestReadingSimplifiedShapes:
    """Test reading the hand-written forms."""

    def test_scalar_attribute_values(self) -> None:
        tree = {"a": [{"@n": 7, "@on": True, "@off": False, "@none": None}]}

        root = tree_to_document(tree).root

        assert root.attributes == {"n": "7", "on": "true", "off": "false", "none": ""}

    def test_scalar_root_body(self) -> None:
        root = tree_to_document({"a": ["hello"]}).root

        assert root == ElementNode("a", children=[TextNode("hello")])

    def test_mapping_value_is_child_element(self) -> None:
        tree = {"root": [{"child": {"@a": "1", "#text": "x"}}]}

        root = tree_to_document(tree).root

        assert root.children == [ElementNode("child", {"a": "1"}, [TextNode("x")])]

    def test_mapping_value_with_comment_key(self) -> None:
        root = tree_to_document({"root": [{"note": {"#comment": "hi"}}]}).root

        assert root.children == [CommentNode("hi")]

    def test_text_precedes_children(self) -> None:
        tree = {"r": [{"r": [{"b": []}], "#text": "t"}]}

        root = tree_to_document(tree).root

        assert root.children == [TextNode("t"), ElementNode("b")]

    def test_last_scalar_text_wins(self) -> None:
        tree = {"r": [{"#text": "first", "label": "second"}]}

        root = tree_to_document(tree).root

        assert root.children == [TextNode("second")]

    def test_collapsed_siblings_take_list_key(self) -> None:
        tree = {"list": [{"item": [{"@id": "1"}, {"@id": "2"}]}]}

        root = tree_to_document(tree).root

        assert root.children == [
            ElementNode("item", {"id": "1"}),
            ElementNode("item", {"id": "2"}),
        ]

    def test_collapsed_siblings_with_text_stay_elements(self) -> None:
        tree = {"root": [{
            "root": [],
            "item": [{"@id": "1", "#text": "x"}, {"@id": "2", "#text": "y"}],
        }]}

        root = tree_to_document(tree).root

        assert root.children == [
            ElementNode("item", {"id": "1"}, [TextNode("x")]),
            ElementNode("item", {"id": "2"}, [TextNode("y")]),
        ]

    def test_collapsed_sibling_with_only_text_is_text(self) -> None:
        tree = {"root": [{"root": [], "item": [{"#text": "x"}]}]}

        root = tree_to_document(tree).root

        assert root.children == [TextNode("x")]

    def test_sequence_items_keep_their_own_tags(self) -> None:
        tree = {"list": [{"list": [{"a": []}, "loose text", {"b": [], "@x": "1"}]}]}

        root = tree_to_document(tree).root

        assert root.children == [
            ElementNode("a"),
            TextNode("loose text"),
            ElementNode("b", {"x": "1"}),
        ]

    def test_extra_top_level_keys_ignored(self) -> None:
        tree = {"a": [{"a": []}, {"b": []}], "other": [{"other": []}]}

        document = tree_to_document(tree)

        assert document.root == ElementNode("a")


class TestShapeErrors:
    """Test strict and lenient handling of malformed trees."""

    def test_not_a_mapping(self) -> None:
        with pytest.raises(TreeShapeError, match="Tree must be a mapping"):
            tree_to_document(["a"])

        assert tree_to_document(["a"], strict=False) is None

    def test_item_without_tag_under_own_children(self) -> None:
        tree = {"root": [{"root": [{"a": []}, {"@id": "1"}]}]}

        with pytest.raises(TreeShapeError) as exc_info:
            tree_to_document(tree)

        assert exc_info.value.path == "root[1]"
        assert exc_info.value.reason == "Sequence entry has no tag name key"
        assert str(exc_info.value) == "Sequence entry has no tag name key (at root[1])"

    def test_lenient_skips_bad_entries(self) -> None:
        tree = {"root": [{"root": [{"a": []}, {"@id": "1"}, [1, 2]]}]}

        root = tree_to_document(tree, strict=False).root

        assert root.children == [ElementNode("a")]

    def test_invalid_tag_name(self) -> None:
        with pytest.raises(TreeShapeError, match="Invalid tag name 'bad tag'"):
            tree_to_document({"bad tag": [{}]})

    def test_nested_paths(self) -> None:
        tree = {"root": [{"root": [{"item": [{"x y": []}]}]}]}

        with pytest.raises(TreeShapeError) as exc_info:
            tree_to_document(tree)

        assert exc_info.value.path == "root[0][0]"

    def test_sibling_path(self) -> None:
        tree = {"root": [{"item": [{"@id": "1"}, [1]]}]}

        with pytest.raises(TreeShapeError) as exc_info:
            tree_to_document(tree)

        assert exc_info.value.path == "root/item[1]"

    def test_container_attribute_value(self) -> None:
        with pytest.raises(TreeShapeError, match="Malformed attribute '@id'"):
            tree_to_document({"a": [{"@id": ["1"]}]})

    def test_container_text_value(self) -> None:
        with pytest.raises(TreeShapeError, match="Text value must be a scalar"):
            tree_to_document({"a": [{"#text": {"x": 1}}]})

    def test_comment_root(self) -> None:
        with pytest.raises(TreeShapeError, match="Document root must be an element"):
            tree_to_document({"a": [{"#comment": "c"}]})

    def test_shape_error_is_value_error(self) -> None:
        assert issubclass(TreeShapeError, ValueError)


class TestMappingToNode:
    """Test single node reading."""

    def test_tagless_entries(self) -> None:
        assert mapping_to_node({"#comment": "c"}) == CommentNode("c")
        assert mapping_to_node({"#text": "t"}) == TextNode("t")
        assert mapping_to_node({"item": [], "@id": "1"}) == ElementNode("item", {"id": "1"})
        assert mapping_to_node("plain") == TextNode("plain")

    def test_element_body_with_tag(self) -> None:
        assert mapping_to_node({"@id": "1"}, tag="x") == ElementNode("x", {"id": "1"})

    def test_tagless_attribute_only_mapping(self) -> None:
        with pytest.raises(TreeShapeError):
            mapping_to_node({"@id": "1"})

        assert mapping_to_node({"@id": "1"}, strict=False) is None
