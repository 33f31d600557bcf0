"""Typed tree model for parsed markup.

A document is an explicit sum type rather than a mapping whose key names
encode node kinds: every child of an element is exactly one of ``TextNode``,
``CommentNode`` or ``ElementNode``, held in a single ordered ``children``
list owned by that element. Nodes carry no parent back-references, so two
trees compare equal when their structure and content match.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union


@dataclass(frozen=True)
class TextNode:
    """A run of character content."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError("Text content must be a string")


@dataclass(frozen=True)
class CommentNode:
    """The text of one ``<!--...-->`` comment."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError("Comment text must be a string")


@dataclass
class ElementNode:
    """A single markup element with attributes and ordered children.

    Attributes keep insertion order, which is the order they appeared in the
    start tag (or in the source mapping) and the order they are written back.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate tag, attributes and children."""
        if not isinstance(self.tag, str) or not self.tag:
            raise ValueError("Element tag cannot be empty")
        for name, value in self.attributes.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise TypeError("Attribute name and value must be strings")
        for child in self.children:
            _check_node(child)

    @property
    def text(self) -> str:
        """Direct text runs of this element joined by a single space."""
        return " ".join(
            child.text for child in self.children if isinstance(child, TextNode)
        )

    @property
    def full_text(self) -> str:
        """All text runs of this element and its descendants, in document order."""
        parts = []
        for child in self.children:
            if isinstance(child, TextNode):
                parts.append(child.text)
            elif isinstance(child, ElementNode):
                nested = child.full_text
                if nested:
                    parts.append(nested)
        return " ".join(parts)

    @property
    def elements(self) -> List["ElementNode"]:
        """Direct child elements."""
        return [child for child in self.children if isinstance(child, ElementNode)]

    @property
    def comments(self) -> List[CommentNode]:
        """Direct child comments."""
        return [child for child in self.children if isinstance(child, CommentNode)]

    @property
    def is_empty(self) -> bool:
        return not self.children

    def append(self, node: "Node") -> None:
        """Append a child node after type-checking it."""
        _check_node(node)
        self.children.append(node)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def find_child(self, tag: str) -> Optional["ElementNode"]:
        """Find first direct child element with matching tag name."""
        for child in self.elements:
            if child.tag == tag:
                return child
        return None

    def find_children(self, tag: str) -> List["ElementNode"]:
        """Find all direct child elements with matching tag name."""
        return [child for child in self.elements if child.tag == tag]

    def find(self, tag: str) -> Optional["ElementNode"]:
        """Find first descendant element with matching tag name (depth first)."""
        for element in self.iter():
            if element is not self and element.tag == tag:
                return element
        return None

    def find_all(self, tag: str) -> List["ElementNode"]:
        """Find all descendant elements with matching tag name."""
        return [
            element for element in self.iter()
            if element is not self and element.tag == tag
        ]

    def iter(self) -> Iterator["ElementNode"]:
        """Yield this element and every descendant element in document order."""
        yield self
        for child in self.elements:
            yield from child.iter()

    def height(self) -> int:
        """Number of element levels in this subtree (a leaf element is 1)."""
        return 1 + max((child.height() for child in self.elements), default=0)


Node = Union[TextNode, CommentNode, ElementNode]
NODE_TYPES = (TextNode, CommentNode, ElementNode)


def _check_node(node: object) -> None:
    if not isinstance(node, NODE_TYPES):
        raise TypeError(
            f"Child must be a TextNode, CommentNode or ElementNode, "
            f"not {type(node).__name__}"
        )


@dataclass
class Document:
    """A parsed document: one root element and its tag.

    ``synthetic`` marks the permissive fallback where the input did not
    resolve to exactly one top-level element and ``root`` is the synthetic
    container holding everything that was found.
    """

    root: ElementNode
    synthetic: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.root, ElementNode):
            raise TypeError("Document root must be an ElementNode")

    @property
    def root_tag(self) -> str:
        return self.root.tag

    @property
    def element_count(self) -> int:
        return sum(1 for _ in self.iter_elements())

    @property
    def max_depth(self) -> int:
        return self.root.height()

    def iter_elements(self) -> Iterator[ElementNode]:
        """Iterate over all elements in document order."""
        return self.root.iter()

    def find(self, tag: str) -> Optional[ElementNode]:
        """Find first element with matching tag name, the root included."""
        if self.root.tag == tag:
            return self.root
        return self.root.find(tag)

    def find_all(self, tag: str) -> List[ElementNode]:
        """Find all elements with matching tag name, the root included."""
        return [element for element in self.iter_elements() if element.tag == tag]
