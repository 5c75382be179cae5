"""
Document Parsers Module

This module provides the parsers that map SCAP source data streams and
standalone XCCDF benchmarks into the oscapxml document model, together
with two registries:

- the parser registry, mapping a ContentFormat to the parser class that
  handles whole documents of that format
- the component mapper registry, mapping the qualified name of a
  ds:component payload to the function that maps it. Payloads without a
  registered mapper are kept as NotImplementedContent.

Available Parsers:
- BaseContentParser: Abstract base class for all parsers
- DatastreamParser: SCAP source data stream collections
- BenchmarkParser: Standalone XCCDF 1.2 benchmarks

Usage:
    from oscapxml.parsers import DatastreamParser, parse_content

    collection = DatastreamParser().parse("/path/to/ssg-rhel8-ds.xml")

    # Auto-detect the format from the root element
    document = parse_content("/path/to/content.xml")
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type

from ..exceptions import ContentError, UnsupportedFormatError
from ..models import ContentFormat
from .base import BaseContentParser, detect_format, load_document, source_name

logger = logging.getLogger(__name__)

# Parser registry - maps formats to parser classes
# Populated when parsers are imported
_parser_registry: Dict[ContentFormat, Type[BaseContentParser]] = {}

# Component mapper registry - maps (namespace, local name) of a component
# payload to the function mapping it into a ComponentContent variant
ComponentMapper = Callable[[Any], Any]
_component_mappers: Dict[Tuple[Optional[str], str], ComponentMapper] = {}


def register_parser(parser_class: Type[BaseContentParser]) -> Type[BaseContentParser]:
    """
    Register a parser class for its supported formats.

    Args:
        parser_class: The parser class to register.

    Returns:
        The same parser class (allows use as decorator).

    Example:
        @register_parser
        class DatastreamParser(BaseContentParser):
            ...
    """
    instance = parser_class()
    for content_format in instance.supported_formats:
        if content_format in _parser_registry:
            logger.warning(
                "Overwriting parser registration for format %s: %s -> %s",
                content_format.value,
                _parser_registry[content_format].__name__,
                parser_class.__name__,
            )
        _parser_registry[content_format] = parser_class
        logger.debug(
            "Registered parser %s for format %s",
            parser_class.__name__,
            content_format.value,
        )
    return parser_class


def register_component_mapper(namespace: Optional[str], name: str) -> Callable[[ComponentMapper], ComponentMapper]:
    """
    Register a mapper for ds:component payloads with the given qualified name.

    Example:
        @register_component_mapper(XCCDF12_NS, "Benchmark")
        def map_benchmark_component(element):
            return XCCDFBenchmark(parse_benchmark(element))
    """

    def decorator(mapper: ComponentMapper) -> ComponentMapper:
        _component_mappers[(namespace, name)] = mapper
        logger.debug("Registered component mapper %s for {%s}%s", mapper.__name__, namespace, name)
        return mapper

    return decorator


def get_component_mapper(namespace: Optional[str], name: str) -> Optional[ComponentMapper]:
    """Return the mapper registered for a payload, or None."""
    return _component_mappers.get((namespace, name))


def get_parser_for_format(content_format: ContentFormat) -> Optional[BaseContentParser]:
    """
    Get a parser instance for the specified content format.

    Returns:
        Parser instance or None if no parser supports the format.
    """
    parser_class = _parser_registry.get(content_format)
    if parser_class:
        return parser_class()
    return None


def get_supported_formats() -> list:
    """Get list of all content formats with a registered parser."""
    return list(_parser_registry.keys())


def parse_content(source, content_format: Optional[ContentFormat] = None):
    """
    Parse a document using the appropriate parser.

    When no format is given the source is loaded once, the format is
    detected from its root element, and the root is handed to the parser
    registered for that format.

    Args:
        source: File path, bytes, file-like object or lxml element/tree.
        content_format: Optional format hint; detected from the root
            element when omitted.

    Returns:
        DataStreamCollection or Benchmark.

    Raises:
        UnsupportedFormatError: If no parser supports the format.
        ContentParseError: If parsing fails.
    """
    source_file = source_name(source)
    if content_format is None:
        try:
            source = load_document(source)
            content_format = detect_format(source)
        except ContentError as e:
            if e.source_file is None:
                e.source_file = source_file
            raise

    parser = get_parser_for_format(content_format)
    if parser is None:
        raise UnsupportedFormatError(
            message=f"No parser registered for format: {content_format.value}",
            source_file=source_file,
            detected_format=content_format.value,
            supported_formats=[f.value for f in get_supported_formats()],
        )
    return parser.parse(source, content_format=content_format, source_file=source_file)


# Import parsers to trigger registration
# These imports are at the bottom to avoid circular imports
from .datastream import DatastreamParser  # noqa: F401, E402
from .xccdf import BenchmarkParser  # noqa: F401, E402

__all__ = [
    # Base class
    "BaseContentParser",
    "detect_format",
    # Registry functions
    "register_parser",
    "register_component_mapper",
    "get_component_mapper",
    "get_parser_for_format",
    "get_supported_formats",
    "parse_content",
    # Concrete parsers
    "DatastreamParser",
    "BenchmarkParser",
]
