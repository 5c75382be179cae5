"""
SCAP Source Data Stream Parser

This module maps an SCAP 1.2 source data stream collection into the
container model of oscapxml.models.sds.

SCAP Data-Stream Structure (SCAP 1.2):
    <ds:data-stream-collection id="..." schematron-version="1.2">
        <ds:data-stream id="..." use-case="CONFIGURATION" scap-version="1.2">
            <ds:checklists>
                <ds:component-ref id="..." xlink:href="#component-id"/>
            </ds:checklists>
            <ds:checks>...</ds:checks>
        </ds:data-stream>
        <ds:component id="component-id" timestamp="...">
            <xccdf:Benchmark>...</xccdf:Benchmark>
        </ds:component>
    </ds:data-stream-collection>

The collection tolerates unknown sibling elements. Component payloads are
mapped through the component mapper registry; payloads without a mapper
are kept as NotImplementedContent.

Usage:
    from oscapxml.parsers.datastream import DatastreamParser

    collection = DatastreamParser().parse("/path/to/ssg-rhel8-ds.xml")
    for data_stream in collection.data_streams:
        print(data_stream.id, len(data_stream.checklists))
"""

import logging
from typing import Any, List, Tuple

from ..exceptions import CardinalityError, MissingAttributeError, NamespaceMismatchError, UnexpectedElementError
from ..models import (
    Catalog,
    CatalogUri,
    Component,
    ComponentRef,
    ContentFormat,
    DataStream,
    DataStreamCollection,
    ExtendedComponent,
    NotImplementedContent,
    RewriteUri,
    ScapVersion,
    Signature,
    UseCase,
)
from ..utils.scap_xml_utils import (
    CAT_NS,
    DSIG_NS,
    SCAP12_NS,
    XLINK_NS,
    element_children,
    enum_choices,
    first_child,
    get_attr,
    is_element,
    line_of,
    local_name,
    namespace_of,
    qname,
    require_attr,
    require_attr_options,
)
from . import get_component_mapper, register_parser
from .base import BaseContentParser
from .dispatch import ChildRule, ChildSchema, UnknownElementPolicy

logger = logging.getLogger(__name__)

# Reference containers of a data stream, in schema order
REF_CONTAINERS = ("dictionaries", "checklists", "checks", "extended-components")


def parse_catalog_uri(el: Any) -> CatalogUri:
    return CatalogUri(name=require_attr(el, "name"), uri=require_attr(el, "uri"))


def parse_rewrite_uri(el: Any) -> RewriteUri:
    return RewriteUri(
        uri_start_string=require_attr(el, "uriStartString"),
        rewrite_prefix=require_attr(el, "rewritePrefix"),
    )


def parse_catalog(el: Any) -> Catalog:
    """
    Map an OASIS XML catalog.

    Raises:
        UnexpectedElementError: If the element is not cat:catalog, or holds
            anything but uri and rewriteURI entries
    """
    if not is_element(el, "catalog", CAT_NS):
        raise UnexpectedElementError("catalog", local_name(el), expected=["catalog"], line_number=line_of(el))
    fields = CATALOG_SCHEMA.collect(el)
    return Catalog(uris=fields["uris"], rewrite_uris=fields["rewrite_uris"])


def parse_component_ref(el: Any) -> ComponentRef:
    """
    Map a ds:component-ref.

    Raises:
        UnexpectedElementError: If the element is not ds:component-ref
        MissingAttributeError: If id or xlink:href is absent
    """
    if not is_element(el, "component-ref", SCAP12_NS):
        raise UnexpectedElementError(
            "component-ref", local_name(el), expected=["component-ref"], line_number=line_of(el)
        )
    ref_id = require_attr(el, "id")
    href = require_attr(el, qname(XLINK_NS, "href"))
    catalog_el = first_child(el, "catalog", CAT_NS)
    return ComponentRef(
        id=ref_id,
        href=href,
        link_type=get_attr(el, qname(XLINK_NS, "type")),
        catalog=parse_catalog(catalog_el) if catalog_el is not None else None,
    )


def _component_refs(el: Any, container: str) -> Tuple[ComponentRef, ...]:
    """Map every component-ref of one reference container; absent -> ()."""
    container_el = first_child(el, container, SCAP12_NS)
    if container_el is None:
        return ()
    return tuple(parse_component_ref(child) for child in element_children(container_el))


def parse_data_stream(el: Any) -> DataStream:
    """
    Map a ds:data-stream.

    Raises:
        MissingAttributeError: If id, use-case or scap-version is absent
        InvalidValueError: If use-case or scap-version is outside its domain
    """
    data_stream_id = require_attr(el, "id")
    use_case = require_attr_options(el, "use-case", enum_choices(UseCase))
    scap_version = require_attr_options(el, "scap-version", enum_choices(ScapVersion))
    dictionaries, checklists, checks, extended_components = (
        _component_refs(el, container) for container in REF_CONTAINERS
    )
    return DataStream(
        id=data_stream_id,
        use_case=UseCase(use_case),
        scap_version=ScapVersion(scap_version),
        timestamp=get_attr(el, "timestamp"),
        dictionaries=dictionaries,
        checklists=checklists,
        checks=checks,
        extended_components=extended_components,
    )


def parse_component(el: Any) -> Component:
    """
    Map a ds:component and its payload.

    The first child element is the payload. It is mapped by the component
    mapper registered for its qualified name, if any.

    Raises:
        MissingAttributeError: If id or timestamp is absent
        CardinalityError: If the component has no child element
        ContentParseError: Whatever the payload mapper raises
    """
    component_id = require_attr(el, "id")
    timestamp = require_attr(el, "timestamp")

    payload = next(element_children(el), None)
    if payload is None:
        raise CardinalityError(
            f"component '{component_id}' doesn't have any child element",
            element="component",
            child="*",
            owner_id=component_id,
            line_number=line_of(el),
        )

    name = local_name(payload)
    namespace = namespace_of(payload)
    mapper = get_component_mapper(namespace, name)
    if mapper is None:
        logger.warning("Component %s: content {%s}%s is not supported, skipping", component_id, namespace, name)
        content = NotImplementedContent(name=name, namespace=namespace)
    else:
        content = mapper(payload)

    return Component(
        id=component_id,
        timestamp=timestamp,
        payload_name=name,
        payload_namespace=namespace,
        content=content,
    )


def parse_extended_component(el: Any) -> ExtendedComponent:
    return ExtendedComponent(id=require_attr(el, "id"), timestamp=require_attr(el, "timestamp"))


def parse_signature(el: Any) -> Signature:
    """Map a dsig:Signature; XML-DSig spells the identifier 'Id'."""
    signature_id = get_attr(el, "Id") or get_attr(el, "id")
    if signature_id is None:
        raise MissingAttributeError(local_name(el), "Id", line_number=line_of(el))
    return Signature(id=signature_id)


def _require_children(fields: dict, field: str, child: str, el: Any) -> None:
    if not fields[field]:
        raise CardinalityError(
            f"The 'data-stream-collection' element needs to have at least 1 child '{child}' element.",
            element="data-stream-collection",
            child=child,
            line_number=line_of(el),
        )


def parse_data_stream_collection(root: Any) -> DataStreamCollection:
    """
    Map a ds:data-stream-collection root element.

    Args:
        root: The collection element

    Returns:
        The mapped DataStreamCollection.

    Raises:
        NamespaceMismatchError: If the root is not in the SCAP 1.2 namespace
        MissingAttributeError: If id or schematron-version is absent
        CardinalityError: If there is no data stream or no component
        ContentParseError: For any violation in nested content
    """
    namespace = namespace_of(root)
    if namespace != SCAP12_NS:
        raise NamespaceMismatchError(local_name(root), namespace, SCAP12_NS, line_number=line_of(root))

    collection_id = require_attr(root, "id")
    schematron_version = require_attr(root, "schematron-version")

    fields = COLLECTION_SCHEMA.collect(root, owner_id=collection_id)
    _require_children(fields, "data_streams", "data-stream", root)
    _require_children(fields, "components", "component", root)

    collection = DataStreamCollection(
        id=collection_id,
        schematron_version=schematron_version,
        **fields,
    )
    logger.info(
        "Mapped data stream collection %s: %d data streams, %d components",
        collection_id,
        len(collection.data_streams),
        len(collection.components),
    )
    return collection


COLLECTION_SCHEMA = ChildSchema(
    "data-stream-collection",
    {
        qname(SCAP12_NS, "data-stream"): ChildRule(parse_data_stream, "data_streams"),
        qname(SCAP12_NS, "component"): ChildRule(parse_component, "components"),
        qname(SCAP12_NS, "extended-component"): ChildRule(parse_extended_component, "extended_components"),
        qname(DSIG_NS, "Signature"): ChildRule(parse_signature, "signatures"),
    },
    unknown=UnknownElementPolicy.SKIP,
    qualified=True,
)

CATALOG_SCHEMA = ChildSchema(
    "catalog",
    {
        qname(CAT_NS, "uri"): ChildRule(parse_catalog_uri, "uris"),
        qname(CAT_NS, "rewriteURI"): ChildRule(parse_rewrite_uri, "rewrite_uris"),
    },
    qualified=True,
    list_expected=True,
)


@register_parser
class DatastreamParser(BaseContentParser):
    """
    Parser for SCAP 1.2 source data stream collections.

    Example:
        >>> parser = DatastreamParser()
        >>> collection = parser.parse("/app/data/scap/ssg-rhel8-ds.xml")
        >>> print(f"Benchmarks: {[b.id for b in collection.benchmarks]}")
    """

    @property
    def supported_formats(self) -> List[ContentFormat]:
        return [ContentFormat.SCAP_DATASTREAM]

    def _map_root(self, root: Any) -> DataStreamCollection:
        return parse_data_stream_collection(root)

    def _describe(self, result: DataStreamCollection) -> str:
        return (
            f"data stream collection {result.id} "
            f"({len(result.data_streams)} data streams, {len(result.components)} components)"
        )


def parse_datastream(source: Any) -> DataStreamCollection:
    """
    Convenience function to parse a source data stream document.

    Args:
        source: File path, bytes, file-like object or lxml element/tree.

    Returns:
        The mapped DataStreamCollection.
    """
    return DatastreamParser().parse(source, content_format=ContentFormat.SCAP_DATASTREAM)
