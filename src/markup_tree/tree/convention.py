"""Conversion between the typed tree and the mapping-based tree convention.

The mapping convention is the external shape of a parsed document::

    {"root": [{"root": [{"#comment": "c"},
                        {"item": [{"#text": "x"}], "@id": "1"}],
               "@lang": "en"}]}

- the document is a one-key mapping whose value is a one-element sequence;
- an element mapping holds its ordered children under its own tag name and
  its attributes under prefixed keys;
- text runs and comments inside a children sequence are single-key mappings
  under the text and comment keys.

Writing a typed tree always produces that canonical shape. Reading accepts it
plus the simplified forms callers build by hand: a child element as a plain
mapping under its tag, repeated siblings as a sequence under their shared
tag, and scalar values as element text.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from markup_tree.shared import TreeConvention, get_logger
from markup_tree.shared.config import NAME_PATTERN

from .model import CommentNode, Document, ElementNode, Node, TextNode

_TAG_RE = re.compile(f"^{NAME_PATTERN}$")
_DEFAULT_CONVENTION = TreeConvention()


class TreeShapeError(ValueError):
    """Raised when a mapping tree does not follow the tree convention."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(f"{message} (at {path})" if path else message)
        self.reason = message
        self.path = path


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_sequence(value)


def _scalar_text(value: Any) -> str:
    """Render a scalar tree value as markup text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# --- typed tree -> mapping ---

def node_to_mapping(
    node: Node, convention: Optional[TreeConvention] = None
) -> Dict[str, Any]:
    """Convert one typed node to its mapping form.

    Args:
        node: Text, comment or element node
        convention: Reserved key convention (defaults to ``@``/``#text``/``#comment``)

    Returns:
        ``{text_key: text}``, ``{comment_key: text}`` or an element mapping
        with the tag key first followed by attribute keys
    """
    convention = convention or _DEFAULT_CONVENTION
    if isinstance(node, TextNode):
        return {convention.text_key: node.text}
    if isinstance(node, CommentNode):
        return {convention.comment_key: node.text}
    if not isinstance(node, ElementNode):
        raise TypeError(f"Unsupported node type: {type(node).__name__}")

    mapping: Dict[str, Any] = {
        node.tag: [node_to_mapping(child, convention) for child in node.children]
    }
    for name, value in node.attributes.items():
        mapping[convention.attribute_key(name)] = value
    return mapping


def document_to_tree(
    document: Document, convention: Optional[TreeConvention] = None
) -> Dict[str, Any]:
    """Convert a typed document to the ``{root_tag: [root_element]}`` mapping."""
    return {document.root_tag: [node_to_mapping(document.root, convention)]}


# --- mapping -> typed tree ---

class _TreeReader:
    """Reads mapping trees into typed nodes.

    In strict mode every shape violation raises ``TreeShapeError``; otherwise
    the offending entry is skipped and counted.
    """

    def __init__(
        self,
        convention: TreeConvention,
        strict: bool,
        correlation_id: Optional[str] = None
    ) -> None:
        self.convention = convention
        self.strict = strict
        self.skipped = 0
        self.logger = get_logger(__name__, correlation_id, "tree_reader")

    def _fail(self, message: str, path: str) -> None:
        if self.strict:
            raise TreeShapeError(message, path)
        self.skipped += 1
        self.logger.warning(
            "Skipping malformed tree entry",
            extra={"reason": message, "path": path}
        )

    def read_document(self, tree: Any) -> Optional[Document]:
        if not isinstance(tree, Mapping):
            self._fail(f"Tree must be a mapping, not {type(tree).__name__}", "")
            return None
        if not tree:
            return None

        root_tag = next(iter(tree))
        if len(tree) > 1:
            self.logger.warning(
                "Tree has several top-level keys; using the first",
                extra={"root_tag": root_tag, "key_count": len(tree)}
            )

        wrapper = tree[root_tag]
        if not _is_sequence(wrapper) or not wrapper:
            return None
        if len(wrapper) > 1:
            self.logger.warning(
                "Root sequence has several items; using the first",
                extra={"root_tag": root_tag, "item_count": len(wrapper)}
            )

        body = wrapper[0]
        path = str(root_tag)
        if isinstance(body, Mapping) and self.convention.comment_key in body:
            self._fail("Document root must be an element, not a comment", path)
            return None

        root = self.read_element(root_tag, body, path)
        if root is None:
            return None
        return Document(root=root)

    def read_entry(
        self, item: Any, path: str, fallback_tag: Optional[str] = None
    ) -> Optional[Node]:
        """Read one item of a children sequence."""
        convention = self.convention
        if isinstance(item, Mapping):
            if convention.comment_key in item:
                return self._read_leaf(CommentNode, item[convention.comment_key], path)
            if convention.text_key in item:
                if fallback_tag is None or len(item) == 1:
                    return self._read_leaf(TextNode, item[convention.text_key], path)
                # Repeated sibling with text plus attributes or children
                return self.read_element(fallback_tag, item, path)

            tag = next(
                (key for key in item
                 if not isinstance(key, str) or not convention.is_reserved(key)),
                None
            )
            if tag is None:
                tag = fallback_tag
            if tag is None:
                self._fail("Sequence entry has no tag name key", path)
                return None
            return self.read_element(tag, item, path)

        if _is_sequence(item):
            self._fail("Nested sequence where an entry was expected", path)
            return None
        return TextNode(_scalar_text(item))

    def read_value(self, tag: str, value: Any, path: str) -> Optional[Node]:
        """Read a value stored under a tag key outside any sequence."""
        if isinstance(value, Mapping) and self.convention.comment_key in value:
            return self._read_leaf(
                CommentNode, value[self.convention.comment_key], path
            )
        return self.read_element(tag, value, path)

    def read_element(self, tag: Any, body: Any, path: str) -> Optional[ElementNode]:
        if not isinstance(tag, str) or not _TAG_RE.match(tag):
            self._fail(f"Invalid tag name {tag!r}", path)
            return None

        if not isinstance(body, Mapping):
            if _is_sequence(body):
                self._fail("Element body must be a mapping or scalar", path)
                return None
            element = ElementNode(tag=tag)
            text = _scalar_text(body)
            if text:
                element.children.append(TextNode(text))
            return element

        convention = self.convention
        attributes: Dict[str, str] = {}
        children: List[Node] = []
        text: Optional[str] = None

        for key, value in body.items():
            if not isinstance(key, str):
                self._fail(f"Mapping key {key!r} is not a string", path)
                continue

            if convention.is_attribute(key):
                name = convention.attribute_name(key)
                if not name or _is_container(value):
                    self._fail(f"Malformed attribute {key!r}", path)
                    continue
                attributes[name] = _scalar_text(value)
            elif key == convention.comment_key:
                continue
            elif key == convention.text_key or not _is_container(value):
                if _is_container(value):
                    self._fail("Text value must be a scalar", path)
                    continue
                text = self._replace_text(text, value, path)
            elif _is_sequence(value):
                children.extend(self._read_sequence(key, value, tag, path))
            else:
                node = self.read_value(key, value, f"{path}/{key}")
                if node is not None:
                    children.append(node)

        # Element text precedes the children
        if text:
            children.insert(0, TextNode(text))
        return ElementNode(tag=tag, attributes=attributes, children=children)

    def _read_sequence(
        self, key: str, items: Any, owner_tag: str, path: str
    ) -> List[Node]:
        own_children = key == owner_tag
        nodes = []
        for index, item in enumerate(items):
            if own_children:
                item_path = f"{path}[{index}]"
            else:
                item_path = f"{path}/{key}[{index}]"
            node = self.read_entry(
                item, item_path, fallback_tag=None if own_children else key
            )
            if node is not None:
                nodes.append(node)
        return nodes

    def _read_leaf(self, node_type: type, value: Any, path: str) -> Optional[Node]:
        if _is_container(value):
            self._fail(f"{node_type.__name__} content must be a scalar", path)
            return None
        return node_type(_scalar_text(value))

    def _replace_text(self, current: Optional[str], value: Any, path: str) -> str:
        text = _scalar_text(value)
        if current is not None and current != text:
            self.logger.warning(
                "Element has several text values; the last one wins",
                extra={"path": path}
            )
        return text


def tree_to_document(
    tree: Any,
    convention: Optional[TreeConvention] = None,
    strict: bool = True,
    correlation_id: Optional[str] = None
) -> Optional[Document]:
    """Read a mapping tree into a typed document.

    Args:
        tree: ``{root_tag: [root_element]}`` mapping
        convention: Reserved key convention
        strict: Raise ``TreeShapeError`` on malformed entries instead of
            skipping them
        correlation_id: Optional correlation ID for logging

    Returns:
        The document, or None for a degenerate tree (no keys, or a root value
        that is missing, not a sequence, or empty)

    Raises:
        TreeShapeError: In strict mode, when the tree breaks the convention
    """
    reader = _TreeReader(convention or _DEFAULT_CONVENTION, strict, correlation_id)
    return reader.read_document(tree)


def mapping_to_node(
    mapping: Any,
    tag: Optional[str] = None,
    convention: Optional[TreeConvention] = None,
    strict: bool = True,
    correlation_id: Optional[str] = None
) -> Optional[Node]:
    """Read a single mapping node.

    With ``tag`` the mapping is the body of an element with that tag (or a
    comment if it carries the comment key). Without it the mapping is
    classified like an item of a children sequence.
    """
    reader = _TreeReader(convention or _DEFAULT_CONVENTION, strict, correlation_id)
    if tag is None:
        return reader.read_entry(mapping, "")
    return reader.read_value(tag, mapping, tag)
