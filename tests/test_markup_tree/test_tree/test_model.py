"""Tests for the typed tree model."""

import pytest

from markup_tree.tree import CommentNode, Document, ElementNode, TextNode


@pytest.fixture
def catalog() -> ElementNode:
    """<catalog><!--c--><book id="1"><title>A</title></book>intro<book id="2"/></catalog>"""
    return ElementNode(
        tag="catalog",
        children=[
            CommentNode("c"),
            ElementNode(
                tag="book",
                attributes={"id": "1"},
                children=[ElementNode(tag="title", children=[TextNode("A")])],
            ),
            TextNode("intro"),
            ElementNode(tag="book", attributes={"id": "2"}),
        ],
    )


class TestLeafNodes:
    """Test TextNode and CommentNode."""

    def test_structural_equality(self) -> None:
        assert TextNode("x") == TextNode("x")
        assert CommentNode("x") == CommentNode("x")
        assert TextNode("x") != CommentNode("x")

    def test_non_string_content_rejected(self) -> None:
        with pytest.raises(TypeError, match="Text content must be a string"):
            TextNode(1)  # type: ignore[arg-type]

        with pytest.raises(TypeError, match="Comment text must be a string"):
            CommentNode(None)  # type: ignore[arg-type]


class TestElementNode:
    """Test ElementNode validation and navigation."""

    def test_empty_tag_rejected(self) -> None:
        with pytest.raises(ValueError, match="Element tag cannot be empty"):
            ElementNode(tag="")

    def test_non_string_attribute_rejected(self) -> None:
        with pytest.raises(TypeError, match="Attribute name and value must be strings"):
            ElementNode(tag="a", attributes={"id": 1})  # type: ignore[dict-item]

    def test_invalid_child_rejected(self) -> None:
        with pytest.raises(TypeError, match="Child must be a TextNode"):
            ElementNode(tag="a", children=["text"])  # type: ignore[list-item]

        element = ElementNode(tag="a")
        with pytest.raises(TypeError):
            element.append({"#text": "x"})  # type: ignore[arg-type]

    def test_append(self) -> None:
        element = ElementNode(tag="a")
        element.append(TextNode("x"))

        assert element.children == [TextNode("x")]
        assert not element.is_empty

    def test_structural_equality(self) -> None:
        first = ElementNode("a", {"id": "1"}, [TextNode("x")])
        second = ElementNode("a", {"id": "1"}, [TextNode("x")])

        assert first == second
        assert first != ElementNode("a", {"id": "2"}, [TextNode("x")])

    def test_text_properties(self) -> None:
        element = ElementNode(
            tag="p",
            children=[
                TextNode("one"),
                ElementNode(tag="b", children=[TextNode("two")]),
                TextNode("three"),
            ],
        )

        assert element.text == "one three"
        assert element.full_text == "one two three"

    def test_child_views(self, catalog: ElementNode) -> None:
        assert [child.tag for child in catalog.elements] == ["book", "book"]
        assert catalog.comments == [CommentNode("c")]
        assert catalog.text == "intro"

    def test_find_child_and_children(self, catalog: ElementNode) -> None:
        assert catalog.find_child("book").get_attribute("id") == "1"
        assert catalog.find_child("title") is None
        assert len(catalog.find_children("book")) == 2

    def test_find_descendants(self, catalog: ElementNode) -> None:
        assert catalog.find("title").text == "A"
        assert catalog.find("catalog") is None
        assert [book.get_attribute("id") for book in catalog.find_all("book")] == ["1", "2"]

    def test_get_attribute_default(self, catalog: ElementNode) -> None:
        assert catalog.get_attribute("missing") is None
        assert catalog.get_attribute("missing", "x") == "x"

    def test_iter_document_order(self, catalog: ElementNode) -> None:
        assert [element.tag for element in catalog.iter()] == [
            "catalog", "book", "title", "book"
        ]

    def test_height(self, catalog: ElementNode) -> None:
        assert catalog.height() == 3
        assert ElementNode(tag="leaf").height() == 1


class TestDocument:
    """Test Document wrapper."""

    def test_document_properties(self, catalog: ElementNode) -> None:
        document = Document(root=catalog)

        assert document.root_tag == "catalog"
        assert document.synthetic is False
        assert document.element_count == 4
        assert document.max_depth == 3

    def test_find_includes_root(self, catalog: ElementNode) -> None:
        document = Document(root=catalog)

        assert document.find("catalog") is catalog
        assert document.find("title").text == "A"
        assert len(document.find_all("book")) == 2
        assert document.find("missing") is None

    def test_root_must_be_element(self) -> None:
        with pytest.raises(TypeError, match="Document root must be an ElementNode"):
            Document(root=TextNode("x"))  # type: ignore[arg-type]
