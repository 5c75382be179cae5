"""
XCCDF 1.2 Benchmark Model

Immutable value types for an XCCDF Benchmark and everything it contains.
Instances are produced by oscapxml.parsers.xccdf; they hold plain strings
and tuples only, never references into the source XML tree.

Groups and Rules form a tree: a Group owns its child Values, Groups and
Rules by value, a Rule is always a leaf.

Design Principles:
- Immutable (frozen dataclasses, tuples for repeatable children)
- Repeatable children keep document order
- Enumerated attributes are str Enums so they compare equal to raw values
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class StatusValue(str, Enum):
    """Allowed values of xccdf:status."""

    INCOMPLETE = "incomplete"
    DRAFT = "draft"
    INTERIM = "interim"
    ACCEPTED = "accepted"
    DEPRECATED = "deprecated"


class RuleRole(str, Enum):
    """Scoring role of a Rule."""

    FULL = "full"
    UNSCORED = "unscored"
    UNCHECKED = "unchecked"


class RuleSeverity(str, Enum):
    """
    Severity of a Rule.

    XCCDF has no "critical" level; the highest severity is HIGH.
    """

    UNKNOWN = "unknown"
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ---------------------------------------------------------------------------
# Descriptive leaves
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Status:
    """Status of an item, optionally dated."""

    status: StatusValue
    date: Optional[str] = None


@dataclass(frozen=True)
class Title:
    text: str


@dataclass(frozen=True)
class Description:
    """Description with restricted HTML flattened to plain text."""

    text: str


@dataclass(frozen=True)
class Notice:
    id: str
    text: str


@dataclass(frozen=True)
class FrontMatter:
    text: str


@dataclass(frozen=True)
class RearMatter:
    text: str


@dataclass(frozen=True)
class Reference:
    text: str
    href: Optional[str] = None


@dataclass(frozen=True)
class PlainText:
    """Reusable text block, addressable by id from sub elements."""

    id: str
    text: str


@dataclass(frozen=True)
class PlatformSpecification:
    text: str


@dataclass(frozen=True)
class Platform:
    """Applicability reference to a CPE name or platform-specification id."""

    idref: str


@dataclass(frozen=True)
class Version:
    text: str
    time: Optional[str] = None
    update: Optional[str] = None


@dataclass(frozen=True)
class Metadata:
    """
    Dublin Core metadata block.

    Only the creator/publisher/contributor/source terms are kept; other
    terms are ignored.
    """

    creators: Tuple[str, ...] = ()
    publishers: Tuple[str, ...] = ()
    contributors: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Model:
    """Scoring model the benchmark supports."""

    system: str


@dataclass(frozen=True)
class ItemWarning:
    """xccdf:warning of a Group or Rule."""

    text: str
    category: str = "general"


@dataclass(frozen=True)
class Question:
    text: str


@dataclass(frozen=True)
class Rationale:
    text: str


@dataclass(frozen=True)
class Requires:
    idref: str


@dataclass(frozen=True)
class Conflicts:
    idref: str


# ---------------------------------------------------------------------------
# Profile contents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Select:
    idref: str
    selected: bool


@dataclass(frozen=True)
class SetComplexValue:
    idref: str
    text: str


@dataclass(frozen=True)
class SetValue:
    idref: str
    text: str


@dataclass(frozen=True)
class RefineValue:
    idref: str
    selector: Optional[str] = None
    operator: Optional[str] = None


@dataclass(frozen=True)
class RefineRule:
    idref: str
    selector: Optional[str] = None
    severity: Optional[str] = None
    role: Optional[str] = None
    weight: Optional[str] = None


# ---------------------------------------------------------------------------
# Rule contents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ident:
    """Long-term globally meaningful identifier (CCE, CVE, ...)."""

    system: str
    text: str


@dataclass(frozen=True)
class ProfileNote:
    tag: str
    text: str


@dataclass(frozen=True)
class FixText:
    text: str
    fixref: Optional[str] = None


@dataclass(frozen=True)
class Fix:
    """
    Remediation script or instructions for a Rule.

    Attributes:
        text: Fix body as character content
        id: Fix identifier referenced by fixtext/@fixref
        system: URI of the remediation system (e.g. urn:xccdf:fix:script:sh)
        platform: CPE the fix applies to
        reboot: Whether applying the fix requires a reboot
        strategy: Remediation strategy (configure, patch, ...)
        disruption: Expected disruption level
        complexity: Expected complexity
    """

    text: str
    id: Optional[str] = None
    system: Optional[str] = None
    platform: Optional[str] = None
    reboot: bool = False
    strategy: str = "unknown"
    disruption: str = "unknown"
    complexity: str = "unknown"


@dataclass(frozen=True)
class CheckContentRef:
    href: str
    name: Optional[str] = None


@dataclass(frozen=True)
class CheckExport:
    value_id: str
    export_name: str


@dataclass(frozen=True)
class Check:
    """
    Reference to a checking engine definition.

    Attributes:
        system: URI of the checking system (e.g. the OVAL namespace)
        id: Optional check identifier
        selector: Selector used by profiles to pick between checks
        negate: Whether the check result is negated
        multi_check: Whether each definition is reported separately
        content_refs: check-content-ref children, in order
        exports: check-export children, in order
    """

    system: str
    id: Optional[str] = None
    selector: Optional[str] = None
    negate: bool = False
    multi_check: bool = False
    content_refs: Tuple[CheckContentRef, ...] = ()
    exports: Tuple[CheckExport, ...] = ()


@dataclass(frozen=True)
class ComplexCheck:
    """Boolean combination of checks and nested complex checks."""

    operator: str
    negate: bool = False
    checks: Tuple[Check, ...] = ()
    complex_checks: Tuple["ComplexCheck", ...] = ()


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValueChoice:
    """One <value> child of a Value, optionally keyed by selector."""

    text: str
    selector: Optional[str] = None


@dataclass(frozen=True)
class Value:
    """
    Tailorable value referenced by checks.

    Attributes:
        id: Value identifier
        value_type: Declared type (number, string, boolean)
        operator: Comparison operator used by checks
        hidden: Whether the value is hidden from users
        prohibit_changes: Whether tailoring may change the value
        interactive: Whether a tool should prompt for the value
        titles: Title children
        descriptions: Description children
        values: value children, in order
    """

    id: str
    value_type: str = "string"
    operator: str = "equals"
    hidden: bool = False
    prohibit_changes: bool = False
    interactive: bool = False
    titles: Tuple[Title, ...] = ()
    descriptions: Tuple[Description, ...] = ()
    values: Tuple[ValueChoice, ...] = ()


@dataclass(frozen=True)
class Profile:
    """
    Named tailoring of a benchmark.

    A Profile selects Rules and Groups and sets Values. Every Profile has at
    least one title.
    """

    id: str
    titles: Tuple[Title, ...]
    prohibit_changes: bool = False
    abstract: bool = False
    note_tag: Optional[str] = None
    extends: Optional[str] = None
    statuses: Tuple[Status, ...] = ()
    version: Optional[Version] = None
    descriptions: Tuple[Description, ...] = ()
    references: Tuple[Reference, ...] = ()
    platforms: Tuple[Platform, ...] = ()
    selects: Tuple[Select, ...] = ()
    set_complex_values: Tuple[SetComplexValue, ...] = ()
    set_values: Tuple[SetValue, ...] = ()
    refine_values: Tuple[RefineValue, ...] = ()
    refine_rules: Tuple[RefineRule, ...] = ()

    @property
    def selected_ids(self) -> Tuple[str, ...]:
        """Ids of items this profile explicitly selects."""
        return tuple(select.idref for select in self.selects if select.selected)


@dataclass(frozen=True)
class Rule:
    """
    A single checklist recommendation.

    Attributes mirror xccdf:selectableItemType plus the Rule specific role,
    severity and multiple flags.
    """

    id: str
    abstract: bool = False
    cluster_id: Optional[str] = None
    extends: Optional[str] = None
    hidden: bool = False
    prohibit_changes: bool = False
    selected: bool = True
    weight: float = 1.0
    role: RuleRole = RuleRole.FULL
    severity: RuleSeverity = RuleSeverity.UNKNOWN
    multiple: bool = False
    statuses: Tuple[Status, ...] = ()
    version: Optional[Version] = None
    titles: Tuple[Title, ...] = ()
    descriptions: Tuple[Description, ...] = ()
    warnings: Tuple[ItemWarning, ...] = ()
    questions: Tuple[Question, ...] = ()
    references: Tuple[Reference, ...] = ()
    metadata: Tuple[Metadata, ...] = ()
    rationales: Tuple[Rationale, ...] = ()
    platforms: Tuple[Platform, ...] = ()
    requires: Tuple[Requires, ...] = ()
    conflicts: Tuple[Conflicts, ...] = ()
    idents: Tuple[Ident, ...] = ()
    profile_notes: Tuple[ProfileNote, ...] = ()
    fixtexts: Tuple[FixText, ...] = ()
    fixes: Tuple[Fix, ...] = ()
    checks: Tuple[Check, ...] = ()
    complex_checks: Tuple[ComplexCheck, ...] = ()


@dataclass(frozen=True)
class Group:
    """
    A node of the checklist hierarchy.

    Groups own nested Values, Groups and Rules.
    """

    id: str
    abstract: bool = False
    cluster_id: Optional[str] = None
    extends: Optional[str] = None
    hidden: bool = False
    prohibit_changes: bool = False
    selected: bool = True
    weight: float = 1.0
    statuses: Tuple[Status, ...] = ()
    version: Optional[Version] = None
    titles: Tuple[Title, ...] = ()
    descriptions: Tuple[Description, ...] = ()
    warnings: Tuple[ItemWarning, ...] = ()
    questions: Tuple[Question, ...] = ()
    references: Tuple[Reference, ...] = ()
    metadata: Tuple[Metadata, ...] = ()
    rationales: Tuple[Rationale, ...] = ()
    platforms: Tuple[Platform, ...] = ()
    requires: Tuple[Requires, ...] = ()
    conflicts: Tuple[Conflicts, ...] = ()
    values: Tuple[Value, ...] = ()
    groups: Tuple["Group", ...] = ()
    rules: Tuple[Rule, ...] = ()

    def iter_rules(self) -> Iterator[Rule]:
        """Yield this group's rules, then those of nested groups, depth first."""
        for rule in self.rules:
            yield rule
        for group in self.groups:
            yield from group.iter_rules()


@dataclass(frozen=True)
class TestResult:
    """Placeholder for an embedded TestResult; results are not modeled."""

    __test__ = False  # not a pytest test class

    id: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    benchmark_href: Optional[str] = None


@dataclass(frozen=True)
class Benchmark:
    """
    An XCCDF 1.2 Benchmark.

    Every Benchmark has at least one status and exactly one version.

    Attributes:
        id: Benchmark identifier
        version: The required version element
        statuses: Status history, at least one entry
        resolved: Whether inheritance has been resolved
        style: Optional style name
        style_href: Optional stylesheet URL
        platform_specification: Optional CPE applicability language block
        profiles: Profiles, in document order
        values: Top level Values
        groups: Top level Groups
        rules: Top level Rules
        test_results: Embedded TestResults
    """

    id: str
    version: Version
    statuses: Tuple[Status, ...]
    resolved: bool = False
    style: Optional[str] = None
    style_href: Optional[str] = None
    titles: Tuple[Title, ...] = ()
    descriptions: Tuple[Description, ...] = ()
    notices: Tuple[Notice, ...] = ()
    front_matter: Tuple[FrontMatter, ...] = ()
    rear_matter: Tuple[RearMatter, ...] = ()
    references: Tuple[Reference, ...] = ()
    plain_texts: Tuple[PlainText, ...] = ()
    platform_specification: Optional[PlatformSpecification] = None
    platforms: Tuple[Platform, ...] = ()
    metadata: Tuple[Metadata, ...] = ()
    models: Tuple[Model, ...] = ()
    profiles: Tuple[Profile, ...] = ()
    values: Tuple[Value, ...] = ()
    groups: Tuple[Group, ...] = ()
    rules: Tuple[Rule, ...] = ()
    test_results: Tuple[TestResult, ...] = ()

    @property
    def title(self) -> Optional[str]:
        """Text of the first title, if any."""
        return self.titles[0].text if self.titles else None

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        """
        Find a profile by its ID.

        Args:
            profile_id: The profile ID to search for.

        Returns:
            The matching Profile or None if not found.
        """
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    def iter_groups(self) -> Iterator[Group]:
        """Yield every group in the benchmark, depth first."""
        stack = list(reversed(self.groups))
        while stack:
            group = stack.pop()
            yield group
            stack.extend(reversed(group.groups))

    def iter_rules(self) -> Iterator[Rule]:
        """Yield top level rules, then the rules of every group, depth first."""
        for rule in self.rules:
            yield rule
        for group in self.groups:
            yield from group.iter_rules()

    @property
    def rule_count(self) -> int:
        """Total number of rules, including nested ones."""
        return sum(1 for _ in self.iter_rules())
