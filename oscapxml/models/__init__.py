"""
oscapxml document model.

Immutable value trees built by the mappers in oscapxml.parsers.
"""

from .common import ContentFormat
from .sds import (
    Catalog,
    CatalogUri,
    Component,
    ComponentContent,
    ComponentRef,
    DataStream,
    DataStreamCollection,
    ExtendedComponent,
    NotImplementedContent,
    RewriteUri,
    ScapVersion,
    Signature,
    UseCase,
    XCCDFBenchmark,
)
from .xccdf import Benchmark, Group, Profile, Rule, RuleRole, RuleSeverity, StatusValue, Value

__all__ = [
    "ContentFormat",
    # Container model
    "Catalog",
    "CatalogUri",
    "Component",
    "ComponentContent",
    "ComponentRef",
    "DataStream",
    "DataStreamCollection",
    "ExtendedComponent",
    "NotImplementedContent",
    "RewriteUri",
    "ScapVersion",
    "Signature",
    "UseCase",
    "XCCDFBenchmark",
    # XCCDF model
    "Benchmark",
    "Group",
    "Profile",
    "Rule",
    "RuleRole",
    "RuleSeverity",
    "StatusValue",
    "Value",
]
