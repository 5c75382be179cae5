"""
Unit tests for checklist resolution and the text report.
"""

import pytest

from oscapxml.exceptions import InconsistentReferenceError
from oscapxml.parsers.datastream import parse_datastream
from oscapxml.parsers.xccdf import BenchmarkParser
from oscapxml.report import (
    ResolutionStatus,
    render_benchmark_report,
    render_report,
    resolve_checklists,
)


def _checklist(ref_id: str, href: str) -> str:
    return (
        '<ds:data-stream id="scap_org.example_datastream_a" use-case="CONFIGURATION" scap-version="1.3">'
        f'<ds:checklists><ds:component-ref id="{ref_id}" xlink:href="{href}"/></ds:checklists>'
        "</ds:data-stream>"
    )


@pytest.mark.unit
class TestResolveChecklists:
    """Test resolving checklist references."""

    def test_sample(self, sample_datastream) -> None:
        resolutions = resolve_checklists(parse_datastream(sample_datastream))

        assert [r.status for r in resolutions] == [ResolutionStatus.RESOLVED, ResolutionStatus.REMOTE]
        resolved = resolutions[0]
        assert resolved.component.id == "scap_org.example_comp_test-xccdf.xml"
        assert resolved.benchmark.id == "xccdf_org.example_benchmark_test"
        assert resolved.data_stream.id == "scap_org.example_datastream_simple"
        assert resolutions[1].component is None
        assert resolutions[1].benchmark is None

    def test_dangling_reference(self, datastream_xml) -> None:
        collection = parse_datastream(datastream_xml(data_streams=_checklist("cref", "#missing")))
        resolutions = resolve_checklists(collection)

        assert resolutions[0].status is ResolutionStatus.UNRESOLVED
        assert resolutions[0].component is None

    def test_reference_to_non_benchmark(self, datastream_xml) -> None:
        components = (
            '<ds:component id="scap_org.example_comp_oval" timestamp="t">'
            "<oval_definitions xmlns='http://oval.mitre.org/XMLSchema/oval-definitions-5'/>"
            "</ds:component>"
        )
        collection = parse_datastream(
            datastream_xml(data_streams=_checklist("cref", "#scap_org.example_comp_oval"), components=components)
        )

        with pytest.raises(InconsistentReferenceError) as exc_info:
            resolve_checklists(collection)

        assert exc_info.value.ref_id == "cref"
        assert exc_info.value.component_id == "scap_org.example_comp_oval"
        assert "oval_definitions" in exc_info.value.payload

    def test_data_stream_without_checklists(self, minimal_datastream) -> None:
        assert resolve_checklists(parse_datastream(minimal_datastream)) == []


@pytest.mark.unit
class TestRenderReport:
    """Test the data stream report."""

    def test_sample_report(self, sample_datastream, expected_sample_report) -> None:
        assert render_report(parse_datastream(sample_datastream)) == expected_sample_report

    def test_benchmark_without_profiles(self, datastream_xml) -> None:
        report = render_report(
            parse_datastream(datastream_xml(data_streams=_checklist("cref", "#scap_org.example_comp_a")))
        )

        assert report.splitlines()[-2:] == [
            "Component ID: scap_org.example_comp_a",
            "Benchmark ID: xccdf_org.example_benchmark_a",
        ]
        assert "Profiles:" not in report

    def test_dangling_reference_lists_only_ref(self, datastream_xml) -> None:
        report = render_report(parse_datastream(datastream_xml(data_streams=_checklist("cref", "#missing"))))
        assert report.splitlines()[-1] == "Ref-Id: cref"

    def test_every_stream_is_listed(self, datastream_xml) -> None:
        data_streams = (
            '<ds:data-stream id="ds-one" use-case="OTHER" scap-version="1.2"/>'
            '<ds:data-stream id="ds-two" use-case="OTHER" scap-version="1.2"/>'
        )
        report = render_report(parse_datastream(datastream_xml(data_streams=data_streams)))

        assert report.splitlines() == [
            "Document type: SCAP Source Data Stream",
            "Stream: ds-one",
            "",
            "Checklists:",
            "Stream: ds-two",
            "",
            "Checklists:",
        ]

    def test_standalone_benchmark_report(self, sample_benchmark_file) -> None:
        report = render_benchmark_report(BenchmarkParser().parse(sample_benchmark_file))

        lines = report.splitlines()
        assert lines[0] == "Document type: XCCDF Benchmark"
        assert lines[1] == "Benchmark ID: xccdf_org.example_benchmark_test"
        assert lines[2] == "Profiles:"
