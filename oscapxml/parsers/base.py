"""
Abstract Base Parser

This module defines the abstract base class every document parser
implements. It owns everything that happens before mapping starts:
reading the source, enforcing size limits, building the lxml tree with a
hardened parser and detecting the document format. Subclasses only map
an already parsed root element into the document model.

Design Principles:
- Template method: parse() handles sources, _map_root() does the mapping
- Mapping is all-or-nothing: the first ContentParseError aborts the parse
- Security-first: XML parsing with XXE prevention built-in
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union

from lxml import etree

from ..config import Settings, get_settings
from ..exceptions import ContentError, ContentParseError, UnsupportedFormatError
from ..models import ContentFormat
from ..utils.scap_xml_utils import local_name

logger = logging.getLogger(__name__)

# Root element local name -> format
ROOT_FORMATS = {
    "data-stream-collection": ContentFormat.SCAP_DATASTREAM,
    "Benchmark": ContentFormat.XCCDF,
}

Source = Union[str, Path, bytes, BinaryIO, Any]


def detect_format(root: Any) -> ContentFormat:
    """
    Detect the document format from its root element.

    Only the local name is inspected; namespace checks are left to the
    mappers so they can report a precise namespace mismatch.

    Raises:
        UnsupportedFormatError: If the root element is not recognized.
    """
    name = local_name(root)
    content_format = ROOT_FORMATS.get(name)
    if content_format is None:
        raise UnsupportedFormatError(
            message=f"Cannot detect content format from root element '{name}'",
            supported_formats=[f.value for f in ContentFormat],
        )
    return content_format


def source_name(source: Source) -> Optional[str]:
    """Return the file name of a path source, None for anything else."""
    if isinstance(source, (str, Path)):
        return str(source)
    return None


def _xml_parser(settings: Settings) -> etree.XMLParser:
    """Build an lxml parser with XXE prevention settings."""
    return etree.XMLParser(
        resolve_entities=False,  # Prevent XXE
        no_network=True,
        remove_pis=True,
        huge_tree=settings.huge_tree,
    )


def _load_file(file_path: Path, settings: Settings) -> Any:
    if not file_path.exists():
        raise FileNotFoundError(f"Content file not found: {file_path}")

    if not file_path.is_file():
        raise ContentParseError(message=f"Path is not a file: {file_path}")

    file_size = file_path.stat().st_size
    if file_size > settings.max_file_size:
        raise ContentParseError(
            message=f"File exceeds maximum size limit ({settings.max_file_size} bytes)",
            details={"file_size": file_size, "max_size": settings.max_file_size},
        )

    logger.debug("Parsing file: %s (%d bytes)", file_path, file_size)
    try:
        tree = etree.parse(str(file_path), _xml_parser(settings))
    except etree.XMLSyntaxError as e:
        raise ContentParseError(message=f"XML parsing failed: {str(e)}", line_number=e.lineno) from e
    return tree.getroot()


def _load_bytes(content_bytes: bytes, settings: Settings) -> Any:
    if len(content_bytes) > settings.max_file_size:
        raise ContentParseError(
            message=f"Content exceeds maximum size limit ({settings.max_file_size} bytes)",
            details={"content_size": len(content_bytes), "max_size": settings.max_file_size},
        )

    try:
        return etree.fromstring(content_bytes, _xml_parser(settings))
    except etree.XMLSyntaxError as e:
        raise ContentParseError(message=f"XML parsing failed: {str(e)}", line_number=e.lineno) from e


def load_document(source: Source, settings: Optional[Settings] = None) -> Any:
    """
    Turn any supported source into an lxml root element.

    Args:
        source: File path (str/Path), raw bytes, binary file object, or an
            already built lxml element or element tree.
        settings: Settings providing size limits; defaults to get_settings().

    Returns:
        The root element.

    Raises:
        FileNotFoundError: If a path source doesn't exist.
        ContentParseError: If the content is too large or not well-formed.
        ValueError: If the source type is not supported.
    """
    settings = settings or get_settings()
    if isinstance(source, (str, Path)):
        return _load_file(Path(source), settings)
    if isinstance(source, bytes):
        return _load_bytes(source, settings)
    if etree.iselement(source):
        return source
    if hasattr(source, "getroot"):
        return source.getroot()
    if hasattr(source, "read"):
        return _load_bytes(source.read(), settings)
    raise ValueError(
        f"Unsupported source type: {type(source).__name__}. "
        "Expected str, Path, bytes, file-like object or lxml element."
    )


class BaseContentParser(ABC):
    """
    Abstract base class for all document parsers.

    Subclasses must implement:
    - supported_formats: List of ContentFormat values this parser handles
    - _map_root: Map a parsed root element into the document model

    Optional overrides:
    - _describe: One-line summary of a mapped result for logging

    Example:
        class DatastreamParser(BaseContentParser):
            @property
            def supported_formats(self) -> List[ContentFormat]:
                return [ContentFormat.SCAP_DATASTREAM]

            def _map_root(self, root):
                return parse_data_stream_collection(root)
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        """Settings given at construction, else the cached global settings."""
        return self._settings or get_settings()

    @property
    @abstractmethod
    def supported_formats(self) -> List[ContentFormat]:
        """
        Return list of content formats this parser supports.

        Returns:
            List of ContentFormat enum values supported by this parser.
        """

    @property
    def parser_name(self) -> str:
        """Human-readable parser name (defaults to class name)."""
        return self.__class__.__name__

    def supports_format(self, content_format: ContentFormat) -> bool:
        return content_format in self.supported_formats

    def parse(
        self,
        source: Source,
        content_format: Optional[ContentFormat] = None,
        source_file: Optional[str] = None,
    ) -> Any:
        """
        Parse a document from any supported source.

        Args:
            source: File path (str/Path), raw bytes, binary file object, or
                an already built lxml element or element tree.
            content_format: Optional format hint. When omitted the format
                is detected from the root element.
            source_file: Name reported in errors; defaults to the path of a
                path source.

        Returns:
            The mapped document model.

        Raises:
            ContentParseError: If the XML is malformed or violates the schema.
            UnsupportedFormatError: If this parser does not handle the document.
            OSError: If the source file cannot be read.
        """
        logger.info(
            "Starting content parse with %s (format: %s)",
            self.parser_name,
            content_format.value if content_format else "auto-detect",
        )

        source_file = source_file or source_name(source)
        try:
            root = load_document(source, self.settings)

            if content_format is None:
                content_format = detect_format(root)

            if not self.supports_format(content_format):
                raise UnsupportedFormatError(
                    message=f"Parser {self.parser_name} does not support format {content_format.value}",
                    detected_format=content_format.value,
                    supported_formats=[f.value for f in self.supported_formats],
                )

            result = self._map_root(root)

        except ContentError as e:
            if e.source_file is None:
                e.source_file = source_file
            raise
        except OSError:
            raise
        except Exception as e:
            logger.error("Unexpected error during parsing: %s", str(e))
            raise ContentParseError(
                message=f"Unexpected parsing error: {str(e)}",
                details={"parser": self.parser_name, "error_type": type(e).__name__},
                source_file=source_file,
            ) from e

        logger.info("Successfully parsed %s from %s", self._describe(result), source_file or "memory")
        return result

    @abstractmethod
    def _map_root(self, root: Any) -> Any:
        """
        Map a parsed root element into the document model.

        Raises:
            ContentParseError: On the first schema violation.
        """

    def _describe(self, result: Any) -> str:
        return type(result).__name__
