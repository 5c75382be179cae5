"""
Child Element Dispatch

Every schema level is described by a ChildSchema: a table mapping child
element names to decoder functions plus the field each decoded value is
collected into. A single pass over the children, in document order, fills
those fields.

How unknown children are handled is a property of the schema, not of the
call site:
- UnknownElementPolicy.FAIL raises UnexpectedElementError (XCCDF bodies,
  which are modeled exhaustively)
- UnknownElementPolicy.SKIP ignores them (the data stream collection, which
  tolerates unknown sibling content)

Usage:
    schema = ChildSchema(
        "Profile",
        {
            "title": ChildRule(parse_title, "titles"),
            "version": ChildRule(parse_version, "version", singleton=True),
        },
    )
    fields = schema.collect(profile_el, owner_id="xccdf_profile_x")
    fields["titles"]   # tuple of Title
    fields["version"]  # Version or None
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Set

from lxml import etree

from ..exceptions import DuplicateElementError, UnexpectedElementError
from ..utils.scap_xml_utils import element_children, line_of, local_name

logger = logging.getLogger(__name__)


class UnknownElementPolicy(str, Enum):
    """What to do with a child the schema has no rule for."""

    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True)
class ChildRule:
    """
    Decoding rule for one child element name.

    Attributes:
        decoder: Callable turning the child element into a model value
        field: Name of the collected field
        singleton: Whether the child may appear at most once
    """

    decoder: Callable[[Any], Any]
    field: str
    singleton: bool = False


class ChildSchema:
    """
    Name -> decoder table for the children of one element type.

    Args:
        owner: Local name of the owning element, used in error messages
        rules: Mapping of child name to ChildRule. Keys are local names, or
            Clark-notation tags when ``qualified`` is set
        unknown: Policy for children without a rule
        qualified: Match children by namespace + local name
        list_expected: Include the accepted names in unexpected-element errors
    """

    def __init__(
        self,
        owner: str,
        rules: Mapping[str, ChildRule],
        unknown: UnknownElementPolicy = UnknownElementPolicy.FAIL,
        qualified: bool = False,
        list_expected: bool = False,
    ) -> None:
        self.owner = owner
        self.rules: Dict[str, ChildRule] = dict(rules)
        self.unknown = unknown
        self.qualified = qualified
        self.list_expected = list_expected

    def _key(self, child: Any) -> str:
        return child.tag if self.qualified else local_name(child)

    def _expected_names(self):
        return [etree.QName(key).localname for key in self.rules]

    def collect(self, element: Any, owner_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Decode the children of ``element``.

        Args:
            element: The owning XML element
            owner_id: Identifier of the owning element, for error messages

        Returns:
            Dictionary with one entry per rule field: a tuple of decoded
            values for repeatable children, the decoded value or None for
            singletons.

        Raises:
            UnexpectedElementError: Unknown child under the FAIL policy
            DuplicateElementError: A singleton child appeared twice
            ContentParseError: Whatever a decoder raises, unchanged
        """
        collected: Dict[str, Any] = {}
        seen: Set[str] = set()
        for rule in self.rules.values():
            collected[rule.field] = None if rule.singleton else []

        for child in element_children(element):
            rule = self.rules.get(self._key(child))
            if rule is None:
                if self.unknown is UnknownElementPolicy.SKIP:
                    logger.debug("Skipping unrecognized element %s in %s", child.tag, self.owner)
                    continue
                raise UnexpectedElementError(
                    self.owner,
                    local_name(child),
                    owner_id=owner_id,
                    expected=self._expected_names() if self.list_expected else None,
                    line_number=line_of(child),
                )

            value = rule.decoder(child)
            if rule.singleton:
                if rule.field in seen:
                    raise DuplicateElementError(
                        self.owner,
                        local_name(child),
                        owner_id=owner_id,
                        line_number=line_of(child),
                    )
                seen.add(rule.field)
                collected[rule.field] = value
            else:
                collected[rule.field].append(value)

        return {field: tuple(value) if isinstance(value, list) else value for field, value in collected.items()}
