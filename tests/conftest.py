"""
Shared test fixtures.

Provides inline SCAP content: a complete source data stream with one local
and one remote checklist, plus factories for small benchmark and data
stream documents used by the edge case tests.
"""

from typing import Callable

import pytest
from lxml import etree

from oscapxml.config import get_settings

NAMESPACE_DECLS = (
    'xmlns:ds="http://scap.nist.gov/schema/scap/source/1.2" '
    'xmlns:xlink="http://www.w3.org/1999/xlink" '
    'xmlns:cat="urn:oasis:names:tc:entity:xmlns:xml:catalog" '
    'xmlns:xccdf="http://checklists.nist.gov/xccdf/1.2" '
    'xmlns:html="http://www.w3.org/1999/xhtml" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:dsig="http://scap.nist.gov/schema/xml-dsig/1.0"'
)

SAMPLE_BENCHMARK = """
    <xccdf:Benchmark id="xccdf_org.example_benchmark_test" resolved="1" style="SCAP_1.2">
      <xccdf:status date="2024-05-01">draft</xccdf:status>
      <xccdf:title>Example Benchmark</xccdf:title>
      <xccdf:description>Guidance for <html:b>example</html:b> systems.</xccdf:description>
      <xccdf:platform idref="cpe:/o:example:os:1"/>
      <xccdf:version>0.1.72</xccdf:version>
      <xccdf:metadata>
        <dc:creator>Example Project</dc:creator>
        <dc:publisher>Example Publisher</dc:publisher>
      </xccdf:metadata>
      <xccdf:Profile id="xccdf_org.example_profile_standard">
        <xccdf:title>Standard System Security Profile</xccdf:title>
        <xccdf:description>Baseline rules for every system.</xccdf:description>
        <xccdf:select idref="xccdf_org.example_rule_password_min_len" selected="true"/>
        <xccdf:select idref="xccdf_org.example_rule_disable_telnet" selected="false"/>
        <xccdf:set-value idref="xccdf_org.example_value_password_min_len">14</xccdf:set-value>
      </xccdf:Profile>
      <xccdf:Profile id="xccdf_org.example_profile_minimal">
        <xccdf:title>Profile Without Description</xccdf:title>
      </xccdf:Profile>
      <xccdf:Value id="xccdf_org.example_value_password_min_len" type="number" operator="greater than or equal">
        <xccdf:title>Minimum password length</xccdf:title>
        <xccdf:value>12</xccdf:value>
        <xccdf:value selector="strict">14</xccdf:value>
      </xccdf:Value>
      <xccdf:Group id="xccdf_org.example_group_system">
        <xccdf:title>System Settings</xccdf:title>
        <xccdf:Group id="xccdf_org.example_group_accounts">
          <xccdf:title>Account Settings</xccdf:title>
          <xccdf:Rule id="xccdf_org.example_rule_password_min_len" severity="medium" selected="false">
            <xccdf:title>Set Password Minimum Length</xccdf:title>
            <xccdf:description>Require at least<html:br/>fourteen characters.</xccdf:description>
            <xccdf:rationale>Short passwords are easy to guess.</xccdf:rationale>
            <xccdf:ident system="https://ncp.nist.gov/cce">CCE-80652-9</xccdf:ident>
            <xccdf:fix system="urn:xccdf:fix:script:sh" reboot="false" strategy="restrict" complexity="low" disruption="low">sed -i 's/^PASS_MIN_LEN.*/PASS_MIN_LEN 14/' /etc/login.defs</xccdf:fix>
            <xccdf:check system="http://oval.mitre.org/XMLSchema/oval-definitions-5">
              <xccdf:check-export value-id="xccdf_org.example_value_password_min_len" export-name="oval:org.example:var:1"/>
              <xccdf:check-content-ref href="test-oval.xml" name="oval:org.example:def:1"/>
            </xccdf:check>
          </xccdf:Rule>
        </xccdf:Group>
        <xccdf:Rule id="xccdf_org.example_rule_disable_telnet" severity="high" role="unscored">
          <xccdf:title>Disable Telnet</xccdf:title>
          <xccdf:complex-check operator="AND">
            <xccdf:check system="http://oval.mitre.org/XMLSchema/oval-definitions-5">
              <xccdf:check-content-ref href="test-oval.xml" name="oval:org.example:def:2"/>
            </xccdf:check>
          </xccdf:complex-check>
        </xccdf:Rule>
      </xccdf:Group>
    </xccdf:Benchmark>
"""

SAMPLE_DATASTREAM = f"""<ds:data-stream-collection {NAMESPACE_DECLS}
    id="scap_org.example_collection_from_xccdf_test-xccdf.xml" schematron-version="1.3">
  <ds:data-stream id="scap_org.example_datastream_simple" use-case="CONFIGURATION"
      scap-version="1.3" timestamp="2024-05-01T12:00:00">
    <ds:checklists>
      <ds:component-ref id="scap_org.example_cref_test-xccdf.xml"
          xlink:href="#scap_org.example_comp_test-xccdf.xml" xlink:type="simple">
        <cat:catalog>
          <cat:uri name="test-oval.xml" uri="#scap_org.example_cref_test-oval.xml"/>
        </cat:catalog>
      </ds:component-ref>
      <ds:component-ref id="scap_org.example_cref_remote-xccdf.xml"
          xlink:href="https://example.org/content/remote-xccdf.xml"/>
    </ds:checklists>
    <ds:checks>
      <ds:component-ref id="scap_org.example_cref_test-oval.xml"
          xlink:href="#scap_org.example_comp_test-oval.xml"/>
    </ds:checks>
  </ds:data-stream>
  <ds:component id="scap_org.example_comp_test-oval.xml" timestamp="2024-05-01T12:00:00">
    <oval_definitions xmlns="http://oval.mitre.org/XMLSchema/oval-definitions-5"/>
  </ds:component>
  <ds:component id="scap_org.example_comp_test-xccdf.xml" timestamp="2024-05-01T12:00:00">
    {SAMPLE_BENCHMARK}
  </ds:component>
  <ds:unknown-sibling/>
</ds:data-stream-collection>
"""

MINIMAL_DATASTREAM = f"""<ds:data-stream-collection {NAMESPACE_DECLS}
    id="scap_org.example_collection_minimal" schematron-version="1.3">
  <ds:data-stream id="scap_org.example_datastream_minimal" use-case="OTHER" scap-version="1.2"/>
  <ds:component id="scap_org.example_comp_minimal" timestamp="2024-05-01T12:00:00">
    <xccdf:Benchmark id="xccdf_org.example_benchmark_minimal">
      <xccdf:status>accepted</xccdf:status>
      <xccdf:version>1.0</xccdf:version>
    </xccdf:Benchmark>
  </ds:component>
</ds:data-stream-collection>
"""


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep OSCAPXML_* variables of the host out of the tests."""
    for name in ("OSCAPXML_LOG_LEVEL", "OSCAPXML_MAX_FILE_SIZE", "OSCAPXML_HUGE_TREE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_datastream() -> bytes:
    """Complete source data stream as bytes."""
    return SAMPLE_DATASTREAM.encode("utf-8")


@pytest.fixture
def minimal_datastream() -> bytes:
    """Smallest valid source data stream."""
    return MINIMAL_DATASTREAM.encode("utf-8")


@pytest.fixture
def sample_datastream_file(tmp_path, sample_datastream):
    """Sample data stream written to a file."""
    path = tmp_path / "ssg-example-ds.xml"
    path.write_bytes(sample_datastream)
    return path


@pytest.fixture
def sample_benchmark_file(tmp_path):
    """Sample benchmark written to a standalone XCCDF file."""
    path = tmp_path / "ssg-example-xccdf.xml"
    content = SAMPLE_BENCHMARK.replace(
        "<xccdf:Benchmark ",
        f"<xccdf:Benchmark {NAMESPACE_DECLS} ",
        1,
    )
    path.write_text(content.strip(), encoding="utf-8")
    return path


@pytest.fixture
def xml() -> Callable[[str], etree._Element]:
    """Parse an XML snippet; the usual SCAP prefixes are pre-declared."""

    def _parse(snippet: str) -> etree._Element:
        wrapped = f"<wrapper {NAMESPACE_DECLS}>{snippet}</wrapper>"
        root = etree.fromstring(wrapped.encode("utf-8"))
        return root[0]

    return _parse


@pytest.fixture
def benchmark_xml() -> Callable[..., bytes]:
    """
    Build a benchmark document around the given body.

    The status and version children are added unless disabled, so the body
    only has to contain what the test is about.
    """

    def _build(
        body: str = "",
        benchmark_id: str = "xccdf_org.example_benchmark_test",
        status: str = "<xccdf:status>draft</xccdf:status>",
        version: str = "<xccdf:version>1.0</xccdf:version>",
    ) -> bytes:
        document = (
            f'<xccdf:Benchmark {NAMESPACE_DECLS} id="{benchmark_id}">'
            f"{status}{version}{body}"
            "</xccdf:Benchmark>"
        )
        return document.encode("utf-8")

    return _build


@pytest.fixture
def datastream_xml() -> Callable[..., bytes]:
    """
    Build a data stream collection from raw children.

    By default the collection holds one data stream and one minimal
    benchmark component; pass replacements to exercise edge cases.
    """

    def _build(
        data_streams: str = (
            '<ds:data-stream id="scap_org.example_datastream_a" use-case="CONFIGURATION" scap-version="1.3"/>'
        ),
        components: str = (
            '<ds:component id="scap_org.example_comp_a" timestamp="2024-05-01T12:00:00">'
            '<xccdf:Benchmark id="xccdf_org.example_benchmark_a">'
            "<xccdf:status>draft</xccdf:status><xccdf:version>1</xccdf:version>"
            "</xccdf:Benchmark></ds:component>"
        ),
        extra: str = "",
        root_attrs: str = 'id="scap_org.example_collection_a" schematron-version="1.3"',
    ) -> bytes:
        document = (
            f"<ds:data-stream-collection {NAMESPACE_DECLS} {root_attrs}>"
            f"{data_streams}{components}{extra}"
            "</ds:data-stream-collection>"
        )
        return document.encode("utf-8")

    return _build


@pytest.fixture
def expected_sample_report() -> str:
    """Report the oscapxml command prints for the sample data stream."""
    return (
        "Document type: SCAP Source Data Stream\n"
        "Stream: scap_org.example_datastream_simple\n"
        "\n"
        "Checklists:\n"
        "Ref-Id: scap_org.example_cref_test-xccdf.xml\n"
        "Component ID: scap_org.example_comp_test-xccdf.xml\n"
        "Benchmark ID: xccdf_org.example_benchmark_test\n"
        "Profiles:\n"
        "* Standard System Security Profile\n"
        "ID: xccdf_org.example_profile_standard\n"
        "Baseline rules for every system.\n"
        "\n"
        "* Profile Without Description\n"
        "ID: xccdf_org.example_profile_minimal\n"
        "Unknown\n"
        "\n"
        "Ref-Id: scap_org.example_cref_remote-xccdf.xml\n"
        "Remote checklists aren't supported by this tool\n"
    )
