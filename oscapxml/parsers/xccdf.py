"""
XCCDF 1.2 Benchmark Mapper

This module maps an xccdf:Benchmark element, and everything nested in it,
into the immutable model of oscapxml.models.xccdf.

Benchmark content is modeled exhaustively: every child of a Benchmark,
Profile, Group or Rule must be a known XCCDF element, otherwise mapping
fails with UnexpectedElementError naming the owner. Leaf elements either
carry plain text, restricted HTML flattened to text, or a small fixed set
of attributes.

Usage:
    from oscapxml.parsers.xccdf import BenchmarkParser, parse_benchmark

    benchmark = BenchmarkParser().parse("/path/to/ssg-rhel8-xccdf.xml")
    benchmark = parse_benchmark(benchmark_element)
"""

import logging
from typing import Any, Dict, List

from ..exceptions import CardinalityError, InvalidValueError, NamespaceMismatchError, UnexpectedElementError
from ..models import ContentFormat
from ..models import xccdf as model
from ..models.sds import XCCDFBenchmark
from ..utils.scap_xml_utils import (
    XCCDF12_NS,
    element_children,
    element_text,
    enum_choices,
    first_child,
    get_attr,
    get_attr_default,
    get_attr_default_options,
    html_to_string,
    line_of,
    local_name,
    namespace_of,
    require_attr,
    require_attr_bool,
    require_attr_options,
    texts_of,
)
from . import register_component_mapper, register_parser
from .base import BaseContentParser
from .dispatch import ChildRule, ChildSchema, UnknownElementPolicy

logger = logging.getLogger(__name__)


STATUS_VALUES: List[str] = enum_choices(model.StatusValue)
ROLE_VALUES: List[str] = enum_choices(model.RuleRole)
SEVERITY_VALUES: List[str] = enum_choices(model.RuleSeverity)

VALUE_TYPES = ["number", "string", "boolean"]
VALUE_OPERATORS = [
    "equals",
    "not equal",
    "greater than",
    "less than",
    "greater than or equal",
    "less than or equal",
    "pattern match",
]
WARNING_CATEGORIES = [
    "general",
    "functionality",
    "performance",
    "hardware",
    "legal",
    "regulatory",
    "management",
    "audit",
    "dependency",
]
FIX_STRATEGIES = ["unknown", "configure", "combination", "disable", "enable", "patch", "policy", "restrict", "update"]
FIX_RATINGS = ["unknown", "low", "medium", "high"]
CHECK_OPERATORS = ["OR", "AND"]

# Dublin Core terms kept in xccdf:metadata
METADATA_TERMS = {
    "creator": "creators",
    "publisher": "publishers",
    "contributor": "contributors",
    "source": "sources",
}


# ---------------------------------------------------------------------------
# Descriptive leaves
# ---------------------------------------------------------------------------


def parse_status(el: Any) -> model.Status:
    """Map xccdf:status; the text must be one of the XCCDF status values."""
    value = element_text(el).strip()
    if value not in STATUS_VALUES:
        raise InvalidValueError(local_name(el), value, STATUS_VALUES, line_number=line_of(el))
    return model.Status(status=model.StatusValue(value), date=get_attr(el, "date"))


def parse_title(el: Any) -> model.Title:
    return model.Title(text=element_text(el))


def parse_description(el: Any) -> model.Description:
    return model.Description(text=html_to_string(el))


def parse_notice(el: Any) -> model.Notice:
    return model.Notice(id=require_attr(el, "id"), text=html_to_string(el))


def parse_front_matter(el: Any) -> model.FrontMatter:
    return model.FrontMatter(text=html_to_string(el))


def parse_rear_matter(el: Any) -> model.RearMatter:
    return model.RearMatter(text=html_to_string(el))


def parse_reference(el: Any) -> model.Reference:
    return model.Reference(text=element_text(el), href=get_attr(el, "href"))


def parse_plain_text(el: Any) -> model.PlainText:
    return model.PlainText(id=require_attr(el, "id"), text=element_text(el))


def parse_platform_specification(el: Any) -> model.PlatformSpecification:
    return model.PlatformSpecification(text=element_text(el))


def parse_platform(el: Any) -> model.Platform:
    return model.Platform(idref=require_attr(el, "idref"))


def parse_version(el: Any) -> model.Version:
    return model.Version(text=element_text(el), time=get_attr(el, "time"), update=get_attr(el, "update"))


def parse_metadata(el: Any) -> model.Metadata:
    """
    Map xccdf:metadata.

    The body is open content; Dublin Core creator, publisher, contributor
    and source terms are collected, anything else is ignored.
    """
    terms: Dict[str, List[Any]] = {field: [] for field in METADATA_TERMS.values()}
    for child in element_children(el):
        field = METADATA_TERMS.get(local_name(child))
        if field is not None:
            terms[field].append(child)
    return model.Metadata(**{field: tuple(texts_of(elements)) for field, elements in terms.items()})


def parse_model(el: Any) -> model.Model:
    return model.Model(system=require_attr(el, "system"))


def parse_warning(el: Any) -> model.ItemWarning:
    return model.ItemWarning(
        text=html_to_string(el),
        category=get_attr_default_options(el, "category", "general", WARNING_CATEGORIES),
    )


def parse_question(el: Any) -> model.Question:
    return model.Question(text=element_text(el))


def parse_rationale(el: Any) -> model.Rationale:
    return model.Rationale(text=html_to_string(el))


def parse_requires(el: Any) -> model.Requires:
    return model.Requires(idref=require_attr(el, "idref"))


def parse_conflicts(el: Any) -> model.Conflicts:
    return model.Conflicts(idref=require_attr(el, "idref"))


# ---------------------------------------------------------------------------
# Profile contents
# ---------------------------------------------------------------------------


def parse_select(el: Any) -> model.Select:
    return model.Select(idref=require_attr(el, "idref"), selected=require_attr_bool(el, "selected"))


def parse_set_complex_value(el: Any) -> model.SetComplexValue:
    return model.SetComplexValue(idref=require_attr(el, "idref"), text=element_text(el))


def parse_set_value(el: Any) -> model.SetValue:
    return model.SetValue(idref=require_attr(el, "idref"), text=element_text(el))


def parse_refine_value(el: Any) -> model.RefineValue:
    return model.RefineValue(
        idref=require_attr(el, "idref"),
        selector=get_attr(el, "selector"),
        operator=get_attr(el, "operator"),
    )


def parse_refine_rule(el: Any) -> model.RefineRule:
    return model.RefineRule(
        idref=require_attr(el, "idref"),
        selector=get_attr(el, "selector"),
        severity=get_attr(el, "severity"),
        role=get_attr(el, "role"),
        weight=get_attr(el, "weight"),
    )


# ---------------------------------------------------------------------------
# Rule contents
# ---------------------------------------------------------------------------


def parse_ident(el: Any) -> model.Ident:
    return model.Ident(system=require_attr(el, "system"), text=element_text(el))


def parse_profile_note(el: Any) -> model.ProfileNote:
    return model.ProfileNote(tag=require_attr(el, "tag"), text=html_to_string(el))


def parse_fixtext(el: Any) -> model.FixText:
    return model.FixText(text=html_to_string(el), fixref=get_attr(el, "fixref"))


def parse_fix(el: Any) -> model.Fix:
    """Map xccdf:fix. The body is kept verbatim, it is usually a script."""
    return model.Fix(
        text=element_text(el),
        id=get_attr(el, "id"),
        system=get_attr(el, "system"),
        platform=get_attr(el, "platform"),
        reboot=get_attr_default(el, "reboot", False),
        strategy=get_attr_default_options(el, "strategy", "unknown", FIX_STRATEGIES),
        disruption=get_attr_default_options(el, "disruption", "unknown", FIX_RATINGS),
        complexity=get_attr_default_options(el, "complexity", "unknown", FIX_RATINGS),
    )


def parse_check_content_ref(el: Any) -> model.CheckContentRef:
    return model.CheckContentRef(href=require_attr(el, "href"), name=get_attr(el, "name"))


def parse_check_export(el: Any) -> model.CheckExport:
    return model.CheckExport(value_id=require_attr(el, "value-id"), export_name=require_attr(el, "export-name"))


def _ignored(el: Any) -> None:
    return None


def parse_check(el: Any) -> model.Check:
    """
    Map xccdf:check.

    check-content-ref and check-export children are kept; check-import and
    inline check-content are accepted but not modeled.
    """
    system = require_attr(el, "system")
    fields = CHECK_SCHEMA.collect(el, owner_id=get_attr(el, "id") or system)
    return model.Check(
        system=system,
        id=get_attr(el, "id"),
        selector=get_attr(el, "selector"),
        negate=get_attr_default(el, "negate", False),
        multi_check=get_attr_default(el, "multi-check", False),
        content_refs=fields["content_refs"],
        exports=fields["exports"],
    )


def parse_complex_check(el: Any) -> model.ComplexCheck:
    """Map xccdf:complex-check, recursing into nested complex checks."""
    operator = require_attr_options(el, "operator", CHECK_OPERATORS)
    fields = COMPLEX_CHECK_SCHEMA.collect(el)
    return model.ComplexCheck(
        operator=operator,
        negate=get_attr_default(el, "negate", False),
        checks=fields["checks"],
        complex_checks=fields["complex_checks"],
    )


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def parse_value_choice(el: Any) -> model.ValueChoice:
    return model.ValueChoice(text=element_text(el), selector=get_attr(el, "selector"))


def parse_value(el: Any) -> model.Value:
    """
    Map xccdf:Value.

    Titles, descriptions and value choices are kept. The remaining Value
    children (defaults, bounds, choices, ...) are skipped.
    """
    value_id = require_attr(el, "id")
    fields = VALUE_SCHEMA.collect(el, owner_id=value_id)
    return model.Value(
        id=value_id,
        value_type=get_attr_default_options(el, "type", "string", VALUE_TYPES),
        operator=get_attr_default_options(el, "operator", "equals", VALUE_OPERATORS),
        hidden=get_attr_default(el, "hidden", False),
        prohibit_changes=get_attr_default(el, "prohibitChanges", False),
        interactive=get_attr_default(el, "interactive", False),
        **fields,
    )


def parse_test_result(el: Any) -> model.TestResult:
    benchmark = first_child(el, "benchmark", XCCDF12_NS)
    return model.TestResult(
        id=require_attr(el, "id"),
        start_time=get_attr(el, "start-time"),
        end_time=get_attr(el, "end-time"),
        benchmark_href=get_attr(benchmark, "href") if benchmark is not None else None,
    )


def parse_profile(el: Any) -> model.Profile:
    """
    Map xccdf:Profile.

    Raises:
        MissingAttributeError: If the profile has no id
        UnexpectedElementError: For a child a Profile cannot contain
        CardinalityError: If the profile has no title
    """
    profile_id = require_attr(el, "id")
    prohibit_changes = get_attr_default(el, "prohibitChanges", False)
    abstract = get_attr_default(el, "abstract", False)
    note_tag = get_attr(el, "note-tag")
    extends = get_attr(el, "extends")

    fields = PROFILE_SCHEMA.collect(el, owner_id=profile_id)
    if not fields["titles"]:
        raise CardinalityError(
            f"Profile '{profile_id}' doesn't have any title",
            element="Profile",
            child="title",
            owner_id=profile_id,
            line_number=line_of(el),
        )

    return model.Profile(
        id=profile_id,
        prohibit_changes=prohibit_changes,
        abstract=abstract,
        note_tag=note_tag,
        extends=extends,
        **fields,
    )


def _selectable_item_attrs(el: Any) -> Dict[str, Any]:
    """Attributes Groups and Rules share (xccdf:selectableItemType)."""
    return {
        "id": require_attr(el, "id"),
        "abstract": get_attr_default(el, "abstract", False),
        "cluster_id": get_attr(el, "cluster-id"),
        "extends": get_attr(el, "extends"),
        "hidden": get_attr_default(el, "hidden", False),
        "prohibit_changes": get_attr_default(el, "prohibitChanges", False),
        "selected": get_attr_default(el, "selected", True),
        "weight": get_attr_default(el, "weight", 1.0),
    }


def parse_group(el: Any) -> model.Group:
    """
    Map xccdf:Group and, recursively, its nested Values, Groups and Rules.

    Raises:
        MissingAttributeError: If the group has no id
        UnexpectedElementError: For a child a Group cannot contain
    """
    attrs = _selectable_item_attrs(el)
    fields = GROUP_SCHEMA.collect(el, owner_id=attrs["id"])
    logger.debug(
        "Mapped Group %s (%d groups, %d rules)",
        attrs["id"],
        len(fields["groups"]),
        len(fields["rules"]),
    )
    return model.Group(**attrs, **fields)


def parse_rule(el: Any) -> model.Rule:
    """
    Map xccdf:Rule.

    Raises:
        MissingAttributeError: If the rule has no id
        InvalidValueError: If role or severity is outside its domain
        UnexpectedElementError: For a child a Rule cannot contain
    """
    attrs = _selectable_item_attrs(el)
    role = get_attr_default_options(el, "role", model.RuleRole.FULL.value, ROLE_VALUES)
    severity = get_attr_default_options(el, "severity", model.RuleSeverity.UNKNOWN.value, SEVERITY_VALUES)
    multiple = get_attr_default(el, "multiple", False)
    fields = RULE_SCHEMA.collect(el, owner_id=attrs["id"])
    return model.Rule(
        role=model.RuleRole(role),
        severity=model.RuleSeverity(severity),
        multiple=multiple,
        **attrs,
        **fields,
    )


def parse_benchmark(el: Any) -> model.Benchmark:
    """
    Map an xccdf:Benchmark element.

    Args:
        el: Benchmark element in the XCCDF 1.2 namespace

    Returns:
        The mapped Benchmark.

    Raises:
        UnexpectedElementError: If the element is not a Benchmark
        NamespaceMismatchError: If it is not in the XCCDF 1.2 namespace
        DuplicateElementError: If version or platform-specification repeats
        CardinalityError: If status or version is missing
        ContentParseError: For any violation in nested content
    """
    if local_name(el) != "Benchmark":
        raise UnexpectedElementError("Benchmark", local_name(el), expected=["Benchmark"], line_number=line_of(el))
    if namespace_of(el) != XCCDF12_NS:
        raise NamespaceMismatchError("Benchmark", namespace_of(el), XCCDF12_NS, line_number=line_of(el))

    benchmark_id = require_attr(el, "id")
    resolved = get_attr_default(el, "resolved", False)
    style = get_attr(el, "style")
    style_href = get_attr(el, "style-href")

    fields = BENCHMARK_SCHEMA.collect(el, owner_id=benchmark_id)
    fields.pop("signature")

    if not fields["statuses"]:
        raise CardinalityError(
            f"xccdf:Benchmark {benchmark_id}: missing status element",
            element="Benchmark",
            child="status",
            owner_id=benchmark_id,
            line_number=line_of(el),
        )
    if fields["version"] is None:
        raise CardinalityError(
            f"xccdf:Benchmark {benchmark_id}: missing version element",
            element="Benchmark",
            child="version",
            owner_id=benchmark_id,
            line_number=line_of(el),
        )

    benchmark = model.Benchmark(
        id=benchmark_id,
        resolved=resolved,
        style=style,
        style_href=style_href,
        **fields,
    )
    logger.info(
        "Mapped benchmark %s: %d profiles, %d groups, %d rules",
        benchmark_id,
        len(benchmark.profiles),
        sum(1 for _ in benchmark.iter_groups()),
        benchmark.rule_count,
    )
    return benchmark


@register_component_mapper(XCCDF12_NS, "Benchmark")
def map_benchmark_component(el: Any) -> XCCDFBenchmark:
    """Component payload mapper for XCCDF 1.2 benchmarks."""
    return XCCDFBenchmark(benchmark=parse_benchmark(el))


# ---------------------------------------------------------------------------
# Child schemas
# ---------------------------------------------------------------------------

# Children shared by Groups and Rules, in schema order
_ITEM_RULES = {
    "status": ChildRule(parse_status, "statuses"),
    "version": ChildRule(parse_version, "version", singleton=True),
    "title": ChildRule(parse_title, "titles"),
    "description": ChildRule(parse_description, "descriptions"),
    "warning": ChildRule(parse_warning, "warnings"),
    "question": ChildRule(parse_question, "questions"),
    "reference": ChildRule(parse_reference, "references"),
    "metadata": ChildRule(parse_metadata, "metadata"),
    "rationale": ChildRule(parse_rationale, "rationales"),
    "platform": ChildRule(parse_platform, "platforms"),
    "requires": ChildRule(parse_requires, "requires"),
    "conflicts": ChildRule(parse_conflicts, "conflicts"),
}

BENCHMARK_SCHEMA = ChildSchema(
    "Benchmark",
    {
        "status": ChildRule(parse_status, "statuses"),
        "title": ChildRule(parse_title, "titles"),
        "description": ChildRule(parse_description, "descriptions"),
        "notice": ChildRule(parse_notice, "notices"),
        "front-matter": ChildRule(parse_front_matter, "front_matter"),
        "rear-matter": ChildRule(parse_rear_matter, "rear_matter"),
        "reference": ChildRule(parse_reference, "references"),
        "plain-text": ChildRule(parse_plain_text, "plain_texts"),
        "platform-specification": ChildRule(
            parse_platform_specification, "platform_specification", singleton=True
        ),
        "platform": ChildRule(parse_platform, "platforms"),
        "version": ChildRule(parse_version, "version", singleton=True),
        "metadata": ChildRule(parse_metadata, "metadata"),
        "model": ChildRule(parse_model, "models"),
        "Profile": ChildRule(parse_profile, "profiles"),
        "Value": ChildRule(parse_value, "values"),
        "Group": ChildRule(parse_group, "groups"),
        "Rule": ChildRule(parse_rule, "rules"),
        "TestResult": ChildRule(parse_test_result, "test_results"),
        # XML digital signature of the whole benchmark
        "signature": ChildRule(_ignored, "signature", singleton=True),
    },
)

PROFILE_SCHEMA = ChildSchema(
    "Profile",
    {
        "status": ChildRule(parse_status, "statuses"),
        "version": ChildRule(parse_version, "version", singleton=True),
        "title": ChildRule(parse_title, "titles"),
        "description": ChildRule(parse_description, "descriptions"),
        "reference": ChildRule(parse_reference, "references"),
        "platform": ChildRule(parse_platform, "platforms"),
        "select": ChildRule(parse_select, "selects"),
        "set-complex-value": ChildRule(parse_set_complex_value, "set_complex_values"),
        "set-value": ChildRule(parse_set_value, "set_values"),
        "refine-value": ChildRule(parse_refine_value, "refine_values"),
        "refine-rule": ChildRule(parse_refine_rule, "refine_rules"),
    },
)

GROUP_SCHEMA = ChildSchema(
    "Group",
    {
        **_ITEM_RULES,
        "Value": ChildRule(parse_value, "values"),
        "Group": ChildRule(parse_group, "groups"),
        "Rule": ChildRule(parse_rule, "rules"),
    },
)

RULE_SCHEMA = ChildSchema(
    "Rule",
    {
        **_ITEM_RULES,
        "ident": ChildRule(parse_ident, "idents"),
        "profile-note": ChildRule(parse_profile_note, "profile_notes"),
        "fixtext": ChildRule(parse_fixtext, "fixtexts"),
        "fix": ChildRule(parse_fix, "fixes"),
        "check": ChildRule(parse_check, "checks"),
        "complex-check": ChildRule(parse_complex_check, "complex_checks"),
    },
)

VALUE_SCHEMA = ChildSchema(
    "Value",
    {
        "title": ChildRule(parse_title, "titles"),
        "description": ChildRule(parse_description, "descriptions"),
        "value": ChildRule(parse_value_choice, "values"),
    },
    unknown=UnknownElementPolicy.SKIP,
)

CHECK_SCHEMA = ChildSchema(
    "check",
    {
        "check-import": ChildRule(_ignored, "imports"),
        "check-export": ChildRule(parse_check_export, "exports"),
        "check-content-ref": ChildRule(parse_check_content_ref, "content_refs"),
        "check-content": ChildRule(_ignored, "content", singleton=True),
    },
)

COMPLEX_CHECK_SCHEMA = ChildSchema(
    "complex-check",
    {
        "check": ChildRule(parse_check, "checks"),
        "complex-check": ChildRule(parse_complex_check, "complex_checks"),
    },
)


@register_parser
class BenchmarkParser(BaseContentParser):
    """
    Parser for standalone XCCDF 1.2 benchmark documents.

    Example:
        >>> parser = BenchmarkParser()
        >>> benchmark = parser.parse("/app/data/scap/ssg-rhel8-xccdf.xml")
        >>> print(f"Rules: {benchmark.rule_count}, Profiles: {len(benchmark.profiles)}")
    """

    @property
    def supported_formats(self) -> List[ContentFormat]:
        return [ContentFormat.XCCDF]

    def _map_root(self, root: Any) -> model.Benchmark:
        return parse_benchmark(root)

    def _describe(self, result: model.Benchmark) -> str:
        return f"benchmark {result.id} ({len(result.profiles)} profiles, {result.rule_count} rules)"
