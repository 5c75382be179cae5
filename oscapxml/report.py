"""
Checklist Resolution and Reporting

Data streams point at their checklists through component-refs. This module
resolves those references against the collection's components and renders
the plain text summary printed by the oscapxml command.

Only same-document references (``#component-id``) are followed; remote
checklists are reported as such and never fetched.

Usage:
    from oscapxml.report import render_report, resolve_checklists

    for resolution in resolve_checklists(collection):
        if resolution.benchmark is not None:
            print(resolution.ref.id, resolution.benchmark.id)

    print(render_report(collection), end="")
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import InconsistentReferenceError
from .models import Benchmark, Component, ComponentRef, DataStream, DataStreamCollection, XCCDFBenchmark

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


class ResolutionStatus(str, Enum):
    """Outcome of resolving one checklist reference."""

    REMOTE = "remote"
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class ChecklistResolution:
    """
    A checklist reference of a data stream together with its target.

    Attributes:
        data_stream: The data stream holding the reference
        ref: The checklist component-ref
        status: Whether the reference is remote, dangling or resolved
        component: The referenced component, when resolved
        benchmark: The component's benchmark, when resolved
    """

    data_stream: DataStream
    ref: ComponentRef
    status: ResolutionStatus
    component: Optional[Component] = None
    benchmark: Optional[Benchmark] = None


def _resolve(collection: DataStreamCollection, data_stream: DataStream, ref: ComponentRef) -> ChecklistResolution:
    if not ref.is_local:
        logger.debug("Checklist %s points at remote content %s", ref.id, ref.href)
        return ChecklistResolution(data_stream, ref, ResolutionStatus.REMOTE)

    component = collection.get_component(ref.fragment)
    if component is None:
        logger.warning("Checklist %s references missing component %s", ref.id, ref.fragment)
        return ChecklistResolution(data_stream, ref, ResolutionStatus.UNRESOLVED)

    if not isinstance(component.content, XCCDFBenchmark):
        raise InconsistentReferenceError(
            ref_id=ref.id,
            component_id=component.id,
            payload=f"{{{component.payload_namespace or ''}}}{component.payload_name}",
        )

    return ChecklistResolution(
        data_stream,
        ref,
        ResolutionStatus.RESOLVED,
        component=component,
        benchmark=component.content.benchmark,
    )


def resolve_checklists(collection: DataStreamCollection) -> List[ChecklistResolution]:
    """
    Resolve the checklist references of every data stream.

    Args:
        collection: A mapped data stream collection

    Returns:
        One ChecklistResolution per checklist reference, data streams and
        references in document order.

    Raises:
        InconsistentReferenceError: If a reference resolves to a component
            that does not carry an XCCDF benchmark
    """
    return [
        _resolve(collection, data_stream, ref)
        for data_stream in collection.data_streams
        for ref in data_stream.checklists
    ]


def _benchmark_lines(benchmark: Benchmark) -> List[str]:
    lines = [f"Benchmark ID: {benchmark.id}"]
    if benchmark.profiles:
        lines.append("Profiles:")
    for profile in benchmark.profiles:
        title = profile.titles[0].text if profile.titles else UNKNOWN
        description = profile.descriptions[0].text if profile.descriptions else UNKNOWN
        lines.extend([f"* {title}", f"ID: {profile.id}", description, ""])
    return lines


def render_benchmark_report(benchmark: Benchmark) -> str:
    """Render the profile summary of a standalone benchmark."""
    lines = ["Document type: XCCDF Benchmark"]
    lines.extend(_benchmark_lines(benchmark))
    return "\n".join(lines) + "\n"


def render_report(collection: DataStreamCollection) -> str:
    """
    Render the summary of a data stream collection.

    Every data stream lists its checklists. Local checklists show the
    component they resolve to and the profiles of its benchmark; remote
    ones are only named.

    Raises:
        InconsistentReferenceError: If a checklist is not a benchmark
    """
    resolutions = resolve_checklists(collection)

    lines = ["Document type: SCAP Source Data Stream"]
    for data_stream in collection.data_streams:
        lines.extend([f"Stream: {data_stream.id}", "", "Checklists:"])
        for resolution in resolutions:
            if resolution.data_stream is not data_stream:
                continue
            lines.append(f"Ref-Id: {resolution.ref.id}")
            if resolution.status is ResolutionStatus.REMOTE:
                lines.append("Remote checklists aren't supported by this tool")
            elif resolution.status is ResolutionStatus.RESOLVED:
                lines.append(f"Component ID: {resolution.component.id}")
                lines.extend(_benchmark_lines(resolution.benchmark))
    return "\n".join(lines) + "\n"
