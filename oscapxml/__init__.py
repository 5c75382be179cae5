"""
oscapxml - SCAP source data stream and XCCDF 1.2 document model

Maps SCAP 1.2 source data stream collections, and the XCCDF 1.2 benchmarks
they carry, from XML into an immutable, typed model. Content is validated
strictly while it is mapped: the first schema violation aborts with a
ContentParseError describing what was wrong and where.

Quick Start:
    from oscapxml import parse_content, render_report

    collection = parse_content("/path/to/ssg-rhel8-ds.xml")
    for benchmark in collection.benchmarks:
        print(benchmark.id, benchmark.rule_count)

    print(render_report(collection), end="")

Module Structure:
    oscapxml/
    ├── __init__.py          # This file - public API
    ├── cli.py               # oscapxml command
    ├── config.py            # Environment driven settings
    ├── exceptions.py        # Error hierarchy
    ├── report.py            # Checklist resolution and text report
    ├── models/              # Immutable document model
    ├── parsers/             # Mappers, parser registry and dispatch
    └── utils/               # Element accessor helpers
"""

from .config import Settings, get_settings
from .exceptions import (
    AttributeValueParseError,
    CardinalityError,
    ContentError,
    ContentParseError,
    DuplicateElementError,
    InconsistentReferenceError,
    InvalidValueError,
    MissingAttributeError,
    NamespaceMismatchError,
    UnexpectedElementError,
    UnsupportedFormatError,
)
from .models import (
    Benchmark,
    Component,
    ComponentRef,
    ContentFormat,
    DataStream,
    DataStreamCollection,
    NotImplementedContent,
    Profile,
    Rule,
    XCCDFBenchmark,
)
from .parsers import BenchmarkParser, DatastreamParser, get_parser_for_format, parse_content
from .parsers.datastream import parse_datastream
from .report import ChecklistResolution, ResolutionStatus, render_benchmark_report, render_report, resolve_checklists

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "ContentError",
    "ContentParseError",
    "NamespaceMismatchError",
    "MissingAttributeError",
    "InvalidValueError",
    "AttributeValueParseError",
    "CardinalityError",
    "DuplicateElementError",
    "UnexpectedElementError",
    "UnsupportedFormatError",
    "InconsistentReferenceError",
    # Models
    "ContentFormat",
    "DataStreamCollection",
    "DataStream",
    "ComponentRef",
    "Component",
    "XCCDFBenchmark",
    "NotImplementedContent",
    "Benchmark",
    "Profile",
    "Rule",
    # Parsing
    "parse_content",
    "parse_datastream",
    "get_parser_for_format",
    "DatastreamParser",
    "BenchmarkParser",
    # Reporting
    "ChecklistResolution",
    "ResolutionStatus",
    "resolve_checklists",
    "render_report",
    "render_benchmark_report",
]
