"""
SCAP XML Utility Functions
Shared element accessors used by every mapper

The mappers never touch lxml internals directly. Attribute lookup, typed
attribute conversion, enumerated-domain checks and text extraction all go
through the helpers below, so every schema violation is reported with the
same message shapes and the same structured exceptions.
"""

import logging
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from lxml import etree

from ..exceptions import AttributeValueParseError, InvalidValueError, MissingAttributeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Namespaces used by SCAP 1.2 source data streams and the content they embed
SCAP12_NS = "http://scap.nist.gov/schema/scap/source/1.2"
XCCDF12_NS = "http://checklists.nist.gov/xccdf/1.2"
DSIG_NS = "http://scap.nist.gov/schema/xml-dsig/1.0"
CAT_NS = "urn:oasis:names:tc:entity:xmlns:xml:catalog"
XLINK_NS = "http://www.w3.org/1999/xlink"
XHTML_NS = "http://www.w3.org/1999/xhtml"
DC_NS = "http://purl.org/dc/elements/1.1/"
XML_NS = "http://www.w3.org/XML/1998/namespace"

SCAP_NAMESPACES = {
    "ds": SCAP12_NS,
    "xccdf": XCCDF12_NS,
    "dsig": DSIG_NS,
    "cat": CAT_NS,
    "xlink": XLINK_NS,
    "html": XHTML_NS,
    "dc": DC_NS,
    "xml": XML_NS,
}

_PREFIX_BY_NAMESPACE = {uri: prefix for prefix, uri in SCAP_NAMESPACES.items()}

# xsd:boolean lexical space
_BOOLEAN_VALUES = {"true": True, "1": True, "false": False, "0": False}


def qname(namespace: Optional[str], name: str) -> str:
    """Build a Clark-notation name ({namespace}name) as used by lxml."""
    if namespace:
        return f"{{{namespace}}}{name}"
    return name


def local_name(element) -> str:
    """Return the element's tag without its namespace."""
    return etree.QName(element).localname


def namespace_of(element) -> Optional[str]:
    """Return the element's namespace URI, or None when it has none."""
    return etree.QName(element).namespace


def is_element(element, name: str, namespace: Optional[str]) -> bool:
    """Check an element's local name and namespace in one go."""
    return local_name(element) == name and namespace_of(element) == namespace


def line_of(element) -> Optional[int]:
    """Source line of an element, when the tree was parsed from text."""
    return getattr(element, "sourceline", None)


def element_children(element) -> Iterator[Any]:
    """
    Iterate over the element children of an element in document order.

    Comments and processing instructions are skipped; their tails are still
    visible through element_text() and html_to_string().
    """
    for child in element:
        if isinstance(child.tag, str):
            yield child


def first_child(element, name: str, namespace: Optional[str]) -> Optional[Any]:
    """Return the first child with the given local name and namespace."""
    for child in element_children(element):
        if is_element(child, name, namespace):
            return child
    return None


def display_attr(name: str) -> str:
    """
    Render an attribute name for messages.

    Namespaced attributes are shown with their conventional prefix
    (xlink:href) instead of Clark notation.
    """
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        prefix = _PREFIX_BY_NAMESPACE.get(namespace)
        if prefix:
            return f"{prefix}:{local}"
    return name


def enum_choices(enum_cls: Type[Enum]) -> List[str]:
    """Return the string values of an Enum in declaration order."""
    return [member.value for member in enum_cls]


def get_attr(element, name: str) -> Optional[str]:
    """
    Look up an attribute without any validation.

    Args:
        element: XML element
        name: Attribute name (Clark notation for namespaced attributes)

    Returns:
        The attribute value, or None when absent
    """
    return element.get(name)


def _convert(element, name: str, value: str, default: T) -> T:
    """Convert a raw attribute value to the type of the default."""
    # bool must be checked before int, it is a subclass
    if isinstance(default, bool):
        converted = _BOOLEAN_VALUES.get(value.strip())
        if converted is None:
            raise AttributeValueParseError(
                local_name(element), display_attr(name), value, "bool", line_number=line_of(element)
            )
        return converted  # type: ignore[return-value]

    if isinstance(default, (int, float)):
        target = type(default)
        try:
            return target(value)  # type: ignore[return-value]
        except ValueError as e:
            raise AttributeValueParseError(
                local_name(element), display_attr(name), value, target.__name__, line_number=line_of(element)
            ) from e

    return value  # type: ignore[return-value]


def get_attr_default(element, name: str, default: T) -> T:
    """
    Read a typed attribute, falling back to a default when absent.

    The value is converted to the type of ``default`` (bool, int, float or
    str). Booleans follow xsd:boolean: true, false, 1 and 0.

    Args:
        element: XML element
        name: Attribute name
        default: Value returned when the attribute is absent

    Returns:
        Converted attribute value or the default

    Raises:
        AttributeValueParseError: If the present value cannot be converted
    """
    value = element.get(name)
    if value is None:
        return default
    return _convert(element, name, value, default)


def _check_options(element, name: str, value: str, options: Sequence[str]) -> str:
    if value in options:
        return value
    raise InvalidValueError(
        local_name(element),
        value,
        list(options),
        attribute=display_attr(name),
        line_number=line_of(element),
    )


def get_attr_default_options(element, name: str, default: str, options: Sequence[str]) -> str:
    """
    Read an enumerated attribute with a default.

    The default is subject to the same check as a present value.

    Raises:
        InvalidValueError: If the resolved value is not one of ``options``
    """
    value = get_attr_default(element, name, default)
    return _check_options(element, name, value, options)


def require_attr(element, name: str) -> str:
    """
    Read a required attribute.

    Raises:
        MissingAttributeError: If the attribute is absent
    """
    value = element.get(name)
    if value is None:
        raise MissingAttributeError(local_name(element), display_attr(name), line_number=line_of(element))
    return value


def require_attr_options(element, name: str, options: Sequence[str]) -> str:
    """
    Read a required enumerated attribute.

    Raises:
        MissingAttributeError: If the attribute is absent
        InvalidValueError: If the value is not one of ``options``
    """
    value = require_attr(element, name)
    return _check_options(element, name, value, options)


def require_attr_bool(element, name: str) -> bool:
    """
    Read a required xsd:boolean attribute.

    Raises:
        MissingAttributeError: If the attribute is absent
        AttributeValueParseError: If the value is not a boolean
    """
    value = require_attr(element, name)
    return _convert(element, name, value, False)


def element_text(element) -> str:
    """
    Return the element's own character content.

    Text of nested elements is not included; text following a nested
    element (its tail) is, since it belongs to this element.
    """
    parts = [element.text or ""]
    for child in element:
        parts.append(child.tail or "")
    return "".join(parts)


def _collapse(text: Optional[str]) -> str:
    return (text or "").replace("\n", " ")


def html_to_string(element) -> str:
    """
    Flatten XCCDF restricted-HTML content to plain text.

    Newlines in text become spaces, ``<br/>`` becomes a newline, and every
    other element contributes its own flattened text with newlines collapsed.

    Example:
        "Open it<br/>and then close it <b>quickly</b>." ->
        "Open it\\nand then close it quickly."
    """
    parts = [_collapse(element.text)]
    for child in element:
        if isinstance(child.tag, str):
            if local_name(child) == "br":
                parts.append("\n")
            else:
                parts.append(html_to_string(child).replace("\n", " "))
        parts.append(_collapse(child.tail))
    return "".join(parts)


def texts_of(elements: Iterable[Any]) -> List[str]:
    """Collect element_text() for a sequence of elements."""
    return [element_text(element) for element in elements]
