"""
Utility helpers shared by the oscapxml mappers.
"""

from .scap_xml_utils import (  # noqa: F401
    CAT_NS,
    DSIG_NS,
    SCAP12_NS,
    SCAP_NAMESPACES,
    XCCDF12_NS,
    XLINK_NS,
    element_children,
    element_text,
    get_attr,
    get_attr_default,
    get_attr_default_options,
    html_to_string,
    local_name,
    namespace_of,
    qname,
    require_attr,
    require_attr_options,
)
