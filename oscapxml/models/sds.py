"""
SCAP Source Data Stream Model

Immutable value types for the SCAP 1.2 source data stream envelope: the
collection, its data streams, the component references they hold, and the
inlined components themselves.

Data streams do not own components. A ComponentRef names a component by a
same-document fragment (``#component-id``) or a remote URI; resolution is
done by oscapxml.report.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .xccdf import Benchmark


class UseCase(str, Enum):
    """Intended use of a data stream (ds:data-stream/@use-case)."""

    CONFIGURATION = "CONFIGURATION"
    VULNERABILITY = "VULNERABILITY"
    INVENTORY = "INVENTORY"
    OTHER = "OTHER"


class ScapVersion(str, Enum):
    """SCAP revision a data stream conforms to."""

    V1_0 = "1.0"
    V1_1 = "1.1"
    V1_2 = "1.2"
    V1_3 = "1.3"


@dataclass(frozen=True)
class CatalogUri:
    """Catalog entry mapping a name to a URI."""

    name: str
    uri: str


@dataclass(frozen=True)
class RewriteUri:
    """Catalog entry rewriting URIs that start with a prefix."""

    uri_start_string: str
    rewrite_prefix: str


@dataclass(frozen=True)
class Catalog:
    """
    OASIS XML catalog attached to a component-ref.

    The rules only matter for remote references, which are not followed.
    """

    uris: Tuple[CatalogUri, ...] = ()
    rewrite_uris: Tuple[RewriteUri, ...] = ()


@dataclass(frozen=True)
class ComponentRef:
    """
    Pointer from a data stream to a component.

    Attributes:
        id: Identifier of the component-ref itself
        href: xlink:href; a leading '#' marks a same-document fragment
        link_type: xlink:type, if given
        catalog: URI rewrite rules, if given
    """

    id: str
    href: str
    link_type: Optional[str] = None
    catalog: Optional[Catalog] = None

    @property
    def is_local(self) -> bool:
        """Whether the href points inside this document."""
        return self.href.startswith("#")

    @property
    def fragment(self) -> Optional[str]:
        """The href without its leading '#', or None for remote references."""
        if not self.is_local:
            return None
        return self.href[1:]


@dataclass(frozen=True)
class XCCDFBenchmark:
    """Component content holding a mapped XCCDF 1.2 Benchmark."""

    benchmark: Benchmark


@dataclass(frozen=True)
class NotImplementedContent:
    """
    Component content of a type oscapxml does not model yet.

    Keeping the payload's qualified name lets callers report what was
    skipped.
    """

    name: str
    namespace: Optional[str]


ComponentContent = Union[XCCDFBenchmark, NotImplementedContent]


@dataclass(frozen=True)
class Component:
    """
    An inlined document (ds:component) addressable by id.

    Attributes:
        id: Component identifier
        timestamp: Creation/modification timestamp
        payload_name: Local name of the single child element
        payload_namespace: Namespace of the single child element
        content: Mapped payload or NotImplementedContent
    """

    id: str
    timestamp: str
    payload_name: str
    payload_namespace: Optional[str]
    content: ComponentContent

    @property
    def benchmark(self) -> Optional[Benchmark]:
        """The benchmark payload, when the component carries one."""
        if isinstance(self.content, XCCDFBenchmark):
            return self.content.benchmark
        return None


@dataclass(frozen=True)
class ExtendedComponent:
    """ds:extended-component placeholder; its payload is not modeled."""

    id: str
    timestamp: str


@dataclass(frozen=True)
class Signature:
    """XML digital signature placeholder."""

    id: str


@dataclass(frozen=True)
class DataStream:
    """
    Named view over a subset of the collection's components.

    The four reference lists are independent and keep document order; an
    absent container element yields an empty tuple.
    """

    id: str
    use_case: UseCase
    scap_version: ScapVersion
    timestamp: Optional[str] = None
    dictionaries: Tuple[ComponentRef, ...] = ()
    checklists: Tuple[ComponentRef, ...] = ()
    checks: Tuple[ComponentRef, ...] = ()
    extended_components: Tuple[ComponentRef, ...] = ()


@dataclass(frozen=True)
class DataStreamCollection:
    """
    Root of a SCAP source data stream document.

    A collection always holds at least one data stream and at least one
    component.

    Attributes:
        id: Collection identifier
        schematron_version: Schematron version the content claims
        data_streams: Data streams, in document order
        components: Inlined components, in document order
        extended_components: Extended components, in document order
        signatures: Digital signatures, in document order
    """

    id: str
    schematron_version: str
    data_streams: Tuple[DataStream, ...]
    components: Tuple[Component, ...]
    extended_components: Tuple[ExtendedComponent, ...] = ()
    signatures: Tuple[Signature, ...] = ()

    def get_component(self, component_id: str) -> Optional[Component]:
        """
        Find a component by its ID.

        Args:
            component_id: The component ID to search for.

        Returns:
            The first matching Component or None if not found.
        """
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def get_data_stream(self, data_stream_id: str) -> Optional[DataStream]:
        """Find a data stream by its ID."""
        for data_stream in self.data_streams:
            if data_stream.id == data_stream_id:
                return data_stream
        return None

    @property
    def benchmarks(self) -> Tuple[Benchmark, ...]:
        """Benchmarks of all components that carry one."""
        return tuple(c.benchmark for c in self.components if c.benchmark is not None)
