"""
oscapxml Exceptions

This module defines the exception classes raised while mapping SCAP source
data streams and XCCDF benchmarks into the document model.

Exception Hierarchy:
- ContentError (base)
  - ContentParseError (malformed XML or schema violations)
    - NamespaceMismatchError
    - MissingAttributeError
    - InvalidValueError
    - AttributeValueParseError
    - CardinalityError
      - DuplicateElementError
    - UnexpectedElementError
  - UnsupportedFormatError (document type not handled)
  - InconsistentReferenceError (checklist points at a non-benchmark)

Design Principles:
- Clear exception hierarchy for targeted exception handling
- Structured context fields so callers match on kind, not on message text
- Serializable to JSON via to_dict()
"""

from typing import Any, Dict, List, Optional, Sequence


class ContentError(Exception):
    """
    Base exception for all oscapxml errors.

    Attributes:
        message: Human-readable error description
        details: Additional context information
        source_file: Path to the content file that caused the error (if applicable)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        source_file: Optional[str] = None,
    ) -> None:
        """
        Initialize a ContentError.

        Args:
            message: Human-readable error description.
            details: Additional context information for debugging.
            source_file: Path to the content file that caused the error.
        """
        self.message = message
        self.details = details or {}
        self.source_file = source_file
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "source_file": self.source_file,
        }


class ContentParseError(ContentError):
    """
    Raised when content cannot be mapped into the document model.

    Every schema violation found by the mappers is a subclass of this
    exception, so a single except clause catches all of them.

    Attributes:
        message: Human-readable error description
        details: Additional context (line number, element name, etc.)
        source_file: Path to the content file
        line_number: Line number where error occurred (if applicable)
        element: Local name of the XML element that caused the error
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        source_file: Optional[str] = None,
        line_number: Optional[int] = None,
        element: Optional[str] = None,
    ) -> None:
        self.line_number = line_number
        self.element = element

        enhanced_details = details or {}
        if line_number is not None:
            enhanced_details["line_number"] = line_number
        if element is not None:
            enhanced_details["element"] = element

        super().__init__(message, enhanced_details, source_file)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["line_number"] = self.line_number
        result["element"] = self.element
        return result


class NamespaceMismatchError(ContentParseError):
    """
    Raised when an element is not in the namespace its schema requires.

    Attributes:
        namespace: Namespace the element actually has
        expected_namespace: Namespace the schema requires
    """

    def __init__(
        self,
        element: str,
        namespace: Optional[str],
        expected_namespace: str,
        line_number: Optional[int] = None,
    ) -> None:
        self.namespace = namespace
        self.expected_namespace = expected_namespace
        super().__init__(
            message=f"Wrong namespace '{namespace or ''}', expected '{expected_namespace}'",
            details={"namespace": namespace, "expected_namespace": expected_namespace},
            line_number=line_number,
            element=element,
        )


class MissingAttributeError(ContentParseError):
    """
    Raised when a required attribute is absent.

    Attributes:
        attribute: Name of the missing attribute
    """

    def __init__(
        self,
        element: str,
        attribute: str,
        line_number: Optional[int] = None,
    ) -> None:
        self.attribute = attribute
        super().__init__(
            message=f"Element '{element}' doesn't have required '{attribute}' attribute",
            details={"attribute": attribute},
            line_number=line_number,
            element=element,
        )


class InvalidValueError(ContentParseError):
    """
    Raised when a value falls outside its enumerated domain.

    Used for attribute values (present or defaulted) and for enumerated
    element text such as xccdf:status.

    Attributes:
        attribute: Attribute name, or None when the element text is checked
        value: The offending value
        allowed: The allowed values, in schema order
    """

    def __init__(
        self,
        element: str,
        value: str,
        allowed: Sequence[str],
        attribute: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.attribute = attribute
        self.value = value
        self.allowed: List[str] = list(allowed)
        if attribute is not None:
            message = (
                f"Element '{element}' attribute '{attribute}'='{value}', "
                f"but expected one of {self.allowed}"
            )
        else:
            message = f"Element '{element}' has value '{value}', but expected one of {self.allowed}"
        super().__init__(
            message=message,
            details={"attribute": attribute, "value": value, "allowed": self.allowed},
            line_number=line_number,
            element=element,
        )


class AttributeValueParseError(ContentParseError):
    """
    Raised when a present attribute cannot be converted to its target type.

    Attributes:
        attribute: Attribute name
        value: The raw attribute value
        target_type: Name of the type the value should convert to
    """

    def __init__(
        self,
        element: str,
        attribute: str,
        value: str,
        target_type: str,
        line_number: Optional[int] = None,
    ) -> None:
        self.attribute = attribute
        self.value = value
        self.target_type = target_type
        super().__init__(
            message=f"Element '{element}' attribute '{attribute}' can't parse value '{value}'.",
            details={"attribute": attribute, "value": value, "target_type": target_type},
            line_number=line_number,
            element=element,
        )


class CardinalityError(ContentParseError):
    """
    Raised when a required child element is absent.

    Attributes:
        child: Local name of the child element whose count is wrong
        owner_id: Identifier of the owning element, when it has one
    """

    def __init__(
        self,
        message: str,
        element: str,
        child: str,
        owner_id: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.child = child
        self.owner_id = owner_id
        super().__init__(
            message=message,
            details={"child": child, "owner_id": owner_id},
            line_number=line_number,
            element=element,
        )


class DuplicateElementError(CardinalityError):
    """Raised when a singleton child element appears more than once."""

    def __init__(
        self,
        element: str,
        child: str,
        owner_id: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        super().__init__(
            message=f"Duplicate {child} elements",
            element=element,
            child=child,
            owner_id=owner_id,
            line_number=line_number,
        )


class UnexpectedElementError(ContentParseError):
    """
    Raised for a child element the schema does not allow at this position.

    Attributes:
        child: Local name of the unexpected element
        owner_id: Identifier of the owning element, when it has one
        expected: Element names that would have been accepted
    """

    def __init__(
        self,
        element: str,
        child: str,
        owner_id: Optional[str] = None,
        expected: Optional[Sequence[str]] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.child = child
        self.owner_id = owner_id
        self.expected: List[str] = list(expected or [])
        if owner_id is not None:
            message = f"{element} '{owner_id}': unexpected element '{child}'"
        else:
            message = f"Unexpected element '{child}'"
        if self.expected:
            message += f", expected one of {self.expected}"
        super().__init__(
            message=message,
            details={"child": child, "owner_id": owner_id, "expected": self.expected},
            line_number=line_number,
            element=element,
        )


class UnsupportedFormatError(ContentError):
    """
    Raised when a document is not a format any registered parser handles.

    Attributes:
        detected_format: The format that was detected (if any)
        supported_formats: List of supported formats
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        source_file: Optional[str] = None,
        detected_format: Optional[str] = None,
        supported_formats: Optional[List[str]] = None,
    ) -> None:
        self.detected_format = detected_format
        self.supported_formats = supported_formats or []

        enhanced_details = details or {}
        if detected_format:
            enhanced_details["detected_format"] = detected_format
        if supported_formats:
            enhanced_details["supported_formats"] = supported_formats

        super().__init__(message, enhanced_details, source_file)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["detected_format"] = self.detected_format
        result["supported_formats"] = self.supported_formats
        return result


class InconsistentReferenceError(ContentError):
    """
    Raised when a checklist reference resolves to a component that is not
    an XCCDF benchmark.

    Attributes:
        ref_id: Identifier of the component-ref
        component_id: Identifier of the component it resolved to
        payload: Qualified name of the component payload
    """

    def __init__(
        self,
        ref_id: str,
        component_id: str,
        payload: str,
    ) -> None:
        self.ref_id = ref_id
        self.component_id = component_id
        self.payload = payload
        super().__init__(
            message=(
                f"Checklist '{ref_id}' references component '{component_id}', "
                f"which isn't a XCCDF benchmark ({payload})"
            ),
            details={"ref_id": ref_id, "component_id": component_id, "payload": payload},
        )
