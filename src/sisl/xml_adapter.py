"""XML adapter: converts between XML documents and the SISL value model."""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from xml.parsers import expat
from .codec import ValueCodec, format_float
from .config import SislLimits
from .types import ErrorCode, ErrorType, SislError


TYPED_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")
# Generic mode keeps qualified names such as ``ns:item``.
GENERIC_NAME_PATTERN = re.compile(r"[^\s<>&\"'/=!?0-9.\-][^\s<>&\"'/=!?]*")
INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

TEXT_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ("\r", "&#13;"))
ATTR_ESCAPES = TEXT_ESCAPES + (('"', "&quot;"), ("\n", "&#10;"), ("\t", "&#9;"))

TYPED_INDENT = "  "
GENERIC_INDENT = "\t"


@dataclass
class XmlNode:
    """Element as read from the source: tag, ordered attributes, children, text."""
    tag: str
    attrs: List[Tuple[str, str]] = field(default_factory=list)
    children: List["XmlNode"] = field(default_factory=list)
    text_chunks: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Direct character data, CDATA included."""
        return "".join(self.text_chunks)

    def attribute(self, name: str) -> Optional[str]:
        for key, value in self.attrs:
            if key == name:
                return value
        return None


@dataclass
class XmlDocument:
    """Parsed document: declaration attributes and the document element."""
    declaration: Optional[Dict[str, str]]
    root: XmlNode


def _escape(text: str, table) -> str:
    for char, entity in table:
        text = text.replace(char, entity)
    return text


def _xml_error(message: str, code: ErrorCode = ErrorCode.MALFORMED_XML) -> SislError:
    return SislError(message, ErrorType.XML, code)


class XmlAdapter:
    """
    Two-mode XML mapping.

    Typed mode (``<root>`` whose children carry ``type`` attributes) maps
    one to one onto the value model. Any other XML is read in generic
    mode as ``_decl``/``_root`` with ``_tag``, ``_attrs``, ``_children``
    and ``_text`` per element, so arbitrary documents survive a trip
    through SISL. Comments, processing instructions and interleaved
    mixed-content text are not preserved.
    """

    def __init__(self, codec: Optional[ValueCodec] = None,
                 limits: Optional[SislLimits] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the XML adapter.

        Args:
            codec: Optional ValueCodec used for scalar validation
            limits: Optional limits (element nesting depth)
            logger: Optional logger instance
        """
        self.limits = limits or (codec.limits if codec else SislLimits())
        self.codec = codec or ValueCodec(self.limits)
        self.logger = logger or logging.getLogger(__name__)

    # XML -> value

    def from_xml(self, text: str) -> Dict[str, Any]:
        """
        Convert an XML document into a dict.

        Args:
            text: XML source

        Returns:
            Typed-mode values, or the generic ``_decl``/``_root`` form

        Raises:
            SislError: On malformed XML or invalid typed content
        """
        document = self.parse(text)
        if self.is_typed(document):
            self.logger.debug("Reading XML in typed mode")
            return {child.tag: self._decode_typed(child) for child in document.root.children}

        self.logger.debug("Reading XML in generic mode")
        result: Dict[str, Any] = {}
        if document.declaration is not None:
            result["_decl"] = dict(document.declaration)
        result["_root"] = self._node_to_generic(document.root)
        return result

    def parse(self, text: str) -> XmlDocument:
        """Parse XML into an XmlDocument without namespace processing."""
        parser = expat.ParserCreate()
        parser.ordered_attributes = True

        declaration: Dict[str, Optional[Dict[str, str]]] = {"value": None}
        stack: List[XmlNode] = []
        roots: List[XmlNode] = []
        max_depth = self.limits.max_nesting_depth

        def on_declaration(version, encoding, standalone):
            decl = {}
            if version is not None:
                decl["version"] = version
            if encoding is not None:
                decl["encoding"] = encoding
            if standalone != -1:
                decl["standalone"] = "yes" if standalone else "no"
            declaration["value"] = decl

        def on_start(tag, attributes):
            if len(stack) >= max_depth:
                raise _xml_error(f"XML nesting depth exceeds {max_depth}",
                                 ErrorCode.NESTING_TOO_DEEP)
            node = XmlNode(tag, list(zip(attributes[::2], attributes[1::2])))
            if stack:
                stack[-1].children.append(node)
            else:
                roots.append(node)
            stack.append(node)

        def on_end(tag):
            stack.pop()

        def on_text(data):
            if stack:
                stack[-1].text_chunks.append(data)

        def on_entity_declaration(*args):
            raise _xml_error("XML entity declarations are not supported")

        parser.XmlDeclHandler = on_declaration
        parser.StartElementHandler = on_start
        parser.EndElementHandler = on_end
        parser.CharacterDataHandler = on_text
        parser.EntityDeclHandler = on_entity_declaration

        try:
            parser.Parse(text, True)
        except expat.ExpatError as e:
            raise _xml_error(f"XML parse error: {expat.ErrorString(e.code)} "
                             f"at line {e.lineno}, column {e.offset + 1}")

        return XmlDocument(declaration["value"], roots[0])

    def is_typed(self, document: XmlDocument) -> bool:
        """
        Typed documents are ``<root>`` elements whose first child has a
        ``type`` attribute; an empty ``<root>`` counts as typed.
        """
        if document.root.tag != "root":
            return False
        if not document.root.children:
            return True
        return document.root.children[0].attribute("type") is not None

    def _decode_typed(self, node: XmlNode) -> Any:
        type_tag = node.attribute("type")
        if not type_tag:
            raise _xml_error(f"Missing type attribute on element: {node.tag}",
                             ErrorCode.MISSING_TYPE_ATTRIBUTE)

        if type_tag == "obj":
            return {child.tag: self._decode_typed(child) for child in node.children}
        if type_tag == "list":
            return [self._decode_typed(child) for child in node.children]

        text = node.text
        if type_tag == "null":
            return None
        if type_tag == "str":
            return text
        if type_tag == "bool":
            if text == "true":
                return True
            if text == "false":
                return False
            raise _xml_error(f"Bool value must be 'true' or 'false', got: {text}",
                             ErrorCode.INVALID_SCALAR)
        if type_tag in ("int", "float"):
            try:
                return self.codec.decode_number_text(type_tag, text)
            except SislError as e:
                raise _xml_error(f"Invalid {type_tag} value: {text}", e.code) from e

        raise _xml_error(f"Unknown type: {type_tag}", ErrorCode.UNKNOWN_TYPE)

    def _node_to_generic(self, node: XmlNode) -> Dict[str, Any]:
        element: Dict[str, Any] = {"_tag": node.tag}
        if node.attrs:
            element["_attrs"] = dict(node.attrs)
        if node.children:
            element["_children"] = [self._node_to_generic(child) for child in node.children]
        else:
            text = node.text
            if text.strip():
                element["_text"] = text
        return element

    # value -> XML

    def to_xml(self, value: Any) -> str:
        """
        Convert a dict into XML text.

        A dict with a top-level ``_root`` key is written in generic mode
        with tab indentation; anything else is written in typed mode
        under ``<root>`` with two-space indentation.

        Raises:
            SislError: If value is not a dict, or holds names or values
                XML cannot represent
        """
        if not isinstance(value, dict):
            raise _xml_error(f"Top-level value must be an object, got {type(value).__name__}",
                             ErrorCode.NON_OBJECT_TOP_LEVEL)

        lines: List[str] = []
        if "_root" in value:
            decl = value.get("_decl")
            if decl is not None:
                if not isinstance(decl, dict):
                    raise _xml_error("_decl must be an object")
                lines.append("<?xml" + self._format_attrs(decl.items()) + "?>")
            self._write_generic(value["_root"], 0, lines)
        else:
            lines.append('<?xml version="1.0" encoding="UTF-8"?>')
            if not value:
                lines.append("<root />")
            else:
                lines.append("<root>")
                for key, child in value.items():
                    self._write_typed(key, child, 1, lines)
                lines.append("</root>")
        return "\n".join(lines) + "\n"

    def _type_name(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "bool"
        if isinstance(value, int):
            return "int"
        if isinstance(value, float):
            return "float"
        if isinstance(value, str):
            return "str"
        if isinstance(value, (list, tuple)):
            return "list"
        if isinstance(value, dict):
            return "obj"
        raise _xml_error(f"Cannot convert value of type {type(value).__name__} to XML",
                         ErrorCode.UNSUPPORTED_VALUE)

    def _scalar_text(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if not math.isfinite(value):
                raise _xml_error("Cannot encode NaN or Infinity in XML",
                                 ErrorCode.UNREPRESENTABLE_FLOAT)
            return format_float(value)
        return str(value)

    def _write_typed(self, name: str, value: Any, depth: int, lines: List[str]) -> None:
        if not isinstance(name, str) or not TYPED_NAME_PATTERN.fullmatch(name):
            raise _xml_error(f"Invalid XML element name: {name}", ErrorCode.INVALID_ELEMENT_NAME)

        indent = TYPED_INDENT * depth
        type_name = self._type_name(value)
        open_tag = f'<{name} type="{type_name}"'

        if type_name in ("list", "obj"):
            if isinstance(value, dict):
                children = list(value.items())
            else:
                children = [("item", item) for item in value]
            if not children:
                lines.append(f"{indent}{open_tag} />")
                return
            lines.append(f"{indent}{open_tag}>")
            for child_name, child in children:
                self._write_typed(child_name, child, depth + 1, lines)
            lines.append(f"{indent}</{name}>")
        elif value is None:
            lines.append(f"{indent}{open_tag} />")
        else:
            text = self._checked_text(self._scalar_text(value))
            lines.append(f"{indent}{open_tag}>{_escape(text, TEXT_ESCAPES)}</{name}>")

    def _write_generic(self, element: Any, depth: int, lines: List[str]) -> None:
        if not isinstance(element, dict):
            raise _xml_error("Generic XML element must be an object")
        tag = element.get("_tag")
        if not isinstance(tag, str) or not GENERIC_NAME_PATTERN.fullmatch(tag):
            raise _xml_error(f"Invalid XML element name: {tag}", ErrorCode.INVALID_ELEMENT_NAME)

        attrs = element.get("_attrs", {})
        if not isinstance(attrs, dict):
            raise _xml_error(f"_attrs of <{tag}> must be an object")

        indent = GENERIC_INDENT * depth
        open_tag = f"<{tag}{self._format_attrs(attrs.items())}"
        children = element.get("_children")
        text = element.get("_text")

        if children is not None:
            if not isinstance(children, list):
                raise _xml_error(f"_children of <{tag}> must be a list")
            if not children:
                lines.append(f"{indent}{open_tag} />")
                return
            lines.append(f"{indent}{open_tag}>")
            for child in children:
                self._write_generic(child, depth + 1, lines)
            lines.append(f"{indent}</{tag}>")
        elif text is not None and text != "":
            if not isinstance(text, str):
                raise _xml_error(f"_text of <{tag}> must be a string")
            text = self._checked_text(text)
            lines.append(f"{indent}{open_tag}>{_escape(text, TEXT_ESCAPES)}</{tag}>")
        else:
            lines.append(f"{indent}{open_tag} />")

    def _format_attrs(self, items) -> str:
        rendered = []
        for name, attr_value in items:
            if not isinstance(name, str) or not GENERIC_NAME_PATTERN.fullmatch(name):
                raise _xml_error(f"Invalid XML attribute name: {name}",
                                 ErrorCode.INVALID_ELEMENT_NAME)
            if not isinstance(attr_value, str):
                raise _xml_error(f"Attribute {name} must be a string")
            attr_value = self._checked_text(attr_value)
            rendered.append(f' {name}="{_escape(attr_value, ATTR_ESCAPES)}"')
        return "".join(rendered)

    def _checked_text(self, text: str) -> str:
        match = INVALID_XML_CHARS.search(text)
        if match:
            raise _xml_error(f"Character U+{ord(match.group()):04X} cannot be represented in XML",
                             ErrorCode.UNSUPPORTED_VALUE)
        return text
