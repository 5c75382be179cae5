"""
Unit tests for the element accessor helpers.

Tests attribute lookup, typed conversion, enumerated domains and the text
flattening used by every mapper.
"""

import pytest
from lxml import etree

from oscapxml.exceptions import AttributeValueParseError, InvalidValueError, MissingAttributeError
from oscapxml.utils.scap_xml_utils import (
    SCAP12_NS,
    XLINK_NS,
    display_attr,
    element_children,
    element_text,
    first_child,
    get_attr,
    get_attr_default,
    get_attr_default_options,
    html_to_string,
    local_name,
    namespace_of,
    qname,
    require_attr,
    require_attr_bool,
    require_attr_options,
)

USE_CASES = ["CONFIGURATION", "VULNERABILITY", "INVENTORY", "OTHER"]


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestNames:
    """Test qualified name helpers."""

    def test_qname_with_namespace(self) -> None:
        assert qname(XLINK_NS, "href") == "{http://www.w3.org/1999/xlink}href"

    def test_qname_without_namespace(self) -> None:
        assert qname(None, "id") == "id"

    def test_local_name_and_namespace(self, xml) -> None:
        el = xml('<ds:data-stream id="x"/>')
        assert local_name(el) == "data-stream"
        assert namespace_of(el) == SCAP12_NS

    def test_namespace_of_unqualified_element(self) -> None:
        el = etree.fromstring("<plain/>")
        assert namespace_of(el) is None

    def test_display_attr_uses_prefix(self) -> None:
        assert display_attr(qname(XLINK_NS, "href")) == "xlink:href"
        assert display_attr("id") == "id"

    def test_element_children_skips_comments(self, xml) -> None:
        el = xml("<a><!-- note --><b/><?pi x?><c/></a>")
        assert [local_name(child) for child in element_children(el)] == ["b", "c"]

    def test_first_child_matches_namespace(self, xml) -> None:
        el = xml('<a><xccdf:title>x</xccdf:title><ds:title>y</ds:title></a>')
        child = first_child(el, "title", SCAP12_NS)
        assert child is not None
        assert child.text == "y"
        assert first_child(el, "missing", SCAP12_NS) is None


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestGetAttr:
    """Test plain attribute lookup."""

    def test_present(self, xml) -> None:
        assert get_attr(xml('<Rule id="r1"/>'), "id") == "r1"

    def test_absent(self, xml) -> None:
        assert get_attr(xml("<Rule/>"), "id") is None

    def test_namespaced(self, xml) -> None:
        el = xml('<ds:component-ref xlink:href="#c1"/>')
        assert get_attr(el, qname(XLINK_NS, "href")) == "#c1"


@pytest.mark.unit
class TestGetAttrDefault:
    """Test typed attributes with defaults."""

    def test_absent_returns_default(self, xml) -> None:
        el = xml("<Rule/>")
        assert get_attr_default(el, "selected", True) is True
        assert get_attr_default(el, "weight", 1.0) == 1.0
        assert get_attr_default(el, "style", "plain") == "plain"

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("1", True), ("false", False), ("0", False)],
    )
    def test_boolean_lexical_forms(self, xml, raw, expected) -> None:
        el = xml(f'<Rule hidden="{raw}"/>')
        assert get_attr_default(el, "hidden", not expected) is expected

    def test_float(self, xml) -> None:
        assert get_attr_default(xml('<Rule weight="2.5"/>'), "weight", 1.0) == 2.5

    def test_int(self, xml) -> None:
        assert get_attr_default(xml('<Rule count="7"/>'), "count", 0) == 7

    def test_string_is_returned_unchanged(self, xml) -> None:
        assert get_attr_default(xml('<Benchmark style="SCAP_1.2"/>'), "style", "") == "SCAP_1.2"

    def test_unparseable_boolean(self, xml) -> None:
        with pytest.raises(AttributeValueParseError) as exc_info:
            get_attr_default(xml('<Rule selected="yes"/>'), "selected", True)

        assert str(exc_info.value) == "Element 'Rule' attribute 'selected' can't parse value 'yes'."
        assert exc_info.value.target_type == "bool"
        assert exc_info.value.value == "yes"

    def test_unparseable_float(self, xml) -> None:
        with pytest.raises(AttributeValueParseError) as exc_info:
            get_attr_default(xml('<Group weight="heavy"/>'), "weight", 1.0)

        assert exc_info.value.element == "Group"
        assert exc_info.value.attribute == "weight"
        assert exc_info.value.target_type == "float"


@pytest.mark.unit
class TestRequireAttr:
    """Test required attributes."""

    def test_present(self, xml) -> None:
        assert require_attr(xml('<Rule id="r1"/>'), "id") == "r1"

    def test_missing_message_shape(self, xml) -> None:
        with pytest.raises(MissingAttributeError) as exc_info:
            require_attr(xml("<Rule/>"), "id")

        assert str(exc_info.value) == "Element 'Rule' doesn't have required 'id' attribute"
        assert exc_info.value.element == "Rule"
        assert exc_info.value.attribute == "id"

    def test_missing_namespaced_attribute_uses_prefix(self, xml) -> None:
        with pytest.raises(MissingAttributeError) as exc_info:
            require_attr(xml('<ds:component-ref id="r"/>'), qname(XLINK_NS, "href"))

        assert str(exc_info.value) == "Element 'component-ref' doesn't have required 'xlink:href' attribute"

    def test_empty_value_is_present(self, xml) -> None:
        assert require_attr(xml('<Rule id=""/>'), "id") == ""

    def test_require_bool(self, xml) -> None:
        assert require_attr_bool(xml('<select selected="false"/>'), "selected") is False

    def test_require_bool_missing(self, xml) -> None:
        with pytest.raises(MissingAttributeError):
            require_attr_bool(xml("<select/>"), "selected")


@pytest.mark.unit
class TestEnumeratedAttributes:
    """Test attributes restricted to a fixed set of values."""

    def test_require_options_accepts_allowed(self, xml) -> None:
        el = xml('<data-stream use-case="OTHER"/>')
        assert require_attr_options(el, "use-case", USE_CASES) == "OTHER"

    def test_require_options_message_lists_allowed_values(self, xml) -> None:
        with pytest.raises(InvalidValueError) as exc_info:
            require_attr_options(xml('<data-stream use-case="AUDIT"/>'), "use-case", USE_CASES)

        assert str(exc_info.value) == (
            "Element 'data-stream' attribute 'use-case'='AUDIT', but expected one of "
            "['CONFIGURATION', 'VULNERABILITY', 'INVENTORY', 'OTHER']"
        )
        assert exc_info.value.value == "AUDIT"
        assert exc_info.value.allowed == USE_CASES

    def test_require_options_missing(self, xml) -> None:
        with pytest.raises(MissingAttributeError):
            require_attr_options(xml("<data-stream/>"), "use-case", USE_CASES)

    def test_default_options_absent(self, xml) -> None:
        assert get_attr_default_options(xml("<Rule/>"), "role", "full", ["full", "unscored"]) == "full"

    def test_default_options_rejects_present_value(self, xml) -> None:
        with pytest.raises(InvalidValueError):
            get_attr_default_options(xml('<Rule role="rule"/>'), "role", "full", ["full", "unscored"])

    def test_default_itself_is_checked(self, xml) -> None:
        with pytest.raises(InvalidValueError) as exc_info:
            get_attr_default_options(xml("<Rule/>"), "role", "bogus", ["full"])

        assert exc_info.value.value == "bogus"


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestElementText:
    """Test own-text extraction."""

    def test_plain(self, xml) -> None:
        assert element_text(xml("<title>Example</title>")) == "Example"

    def test_empty(self, xml) -> None:
        assert element_text(xml("<title/>")) == ""

    def test_keeps_tails_but_not_child_text(self, xml) -> None:
        assert element_text(xml("<a>one <b>two</b> three</a>")) == "one  three"

    def test_whitespace_is_preserved(self, xml) -> None:
        assert element_text(xml("<version>\n  1.0\n</version>")) == "\n  1.0\n"


@pytest.mark.unit
class TestHtmlToString:
    """Test restricted-HTML flattening."""

    def test_newline_becomes_space_and_markup_is_stripped(self, xml) -> None:
        el = xml("<description>We are\nthe <html:em>best</html:em> project!</description>")
        assert html_to_string(el) == "We are the best project!"

    def test_br_becomes_newline(self, xml) -> None:
        el = xml("<description>Open it<html:br/>and then close it <html:b>quickly</html:b>.</description>")
        assert html_to_string(el) == "Open it\nand then close it quickly."

    def test_nested_markup_is_flattened_recursively(self, xml) -> None:
        el = xml(
            "<description><html:p>Run <html:code>grep\n<html:i>x</html:i></html:code> now</html:p></description>"
        )
        assert html_to_string(el) == "Run grep x now"

    def test_br_inside_nested_element_collapses(self, xml) -> None:
        el = xml("<description><html:p>a<html:br/>b</html:p></description>")
        assert html_to_string(el) == "a b"

    def test_comment_tail_is_kept(self, xml) -> None:
        el = xml("<description>before<!-- hidden -->after</description>")
        assert html_to_string(el) == "beforeafter"

    def test_empty(self, xml) -> None:
        assert html_to_string(xml("<description/>")) == ""
