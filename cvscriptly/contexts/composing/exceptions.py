"""Custom exceptions for the composing context."""

from typing import Optional


class InvalidResumeDataError(ValueError):
    """
    Exception raised when resume data is structurally invalid.

    Raised for problems a renderer cannot paper over: duplicate entry ids within
    a collection, unknown or repeated section keys, or a payload that is not a
    mapping. Cosmetic problems (bad colors, odd font sizes) never raise.

    Attributes:
        message: Error description
        field_name: Dotted path of the offending field (e.g., 'experience[2].id')
        value: The offending value
    """

    def __init__(self, message: str, field_name: Optional[str] = None, value=None):
        self.message = message
        self.field_name = field_name
        self.value = value

        parts = [message]
        if field_name:
            parts.append(f"Field: {field_name}")
        if value is not None:
            shown = repr(value)
            parts.append(f"Value: {shown[:200] + '...' if len(shown) > 200 else shown}")

        super().__init__("\n".join(parts))
