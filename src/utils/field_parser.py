"""Loose host field conversion utilities"""

from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

# Generic type for any Enum subclass
E = TypeVar("E", bound=Enum)


class FieldParser:
    """
    Converts loosely typed host field values into Python types.

    The host delivers settings as whatever the panel widget produced:
    booleans may arrive as True or "true", numbers as 2 or "2.5", lists as
    comma-separated strings. Every converter takes a default that is
    returned when the value is missing or unparsable.
    """

    @staticmethod
    def to_bool(value: Any, default: bool = False) -> bool:
        """
        Parse a checkbox value.

        Accepts real booleans and the strings "true"/"false" (any case).
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        return default

    @staticmethod
    def to_float(value: Any, default: float, minimum: Optional[float] = None,
                 maximum: Optional[float] = None) -> float:
        """
        Parse a number field.

        Args:
            value: Raw field value
            default: Returned for missing/unparsable/non-finite values
            minimum: Values below are treated as invalid (default returned)
            maximum: Values above are clamped

        Returns:
            Parsed float
        """
        if value is None or isinstance(value, bool):
            return default
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return default
        if number != number or number in (float("inf"), float("-inf")):
            return default
        if minimum is not None and number < minimum:
            return default
        if maximum is not None and number > maximum:
            return maximum
        return number

    @staticmethod
    def to_int(value: Any, default: int, minimum: Optional[int] = None) -> int:
        """Parse an integer field (leading integer part of a string, like "3 users")."""
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, (int, float)):
            number = int(value)
        else:
            text = str(value).strip()
            digits = ""
            for i, ch in enumerate(text):
                if ch.isdigit() or (i == 0 and ch in "+-"):
                    digits += ch
                else:
                    break
            try:
                number = int(digits)
            except ValueError:
                return default
        if minimum is not None and number < minimum:
            return default
        return number

    @staticmethod
    def to_str(value: Any, default: str = "") -> str:
        """Parse a text field, trimmed; empty means default"""
        if value is None:
            return default
        text = str(value).strip()
        return text or default

    @staticmethod
    def to_list(value: Any, default: Optional[List[str]] = None) -> List[str]:
        """
        Parse a comma-separated list field.

        Items are trimmed and empty items dropped. An empty result means default.
        """
        if isinstance(value, (list, tuple)):
            items = [str(v).strip() for v in value]
        elif isinstance(value, str):
            items = [part.strip() for part in value.split(",")]
        else:
            items = []
        items = [i for i in items if i]
        if not items:
            return list(default or [])
        return items

    @staticmethod
    def to_enum(enum_class: Type[E], value: Any, default: E) -> E:
        """
        Parse a select field into an Enum by value, ignoring case and
        surrounding whitespace ("on-click", " Proximity " both work).
        """
        if isinstance(value, enum_class):
            return value
        if not isinstance(value, str):
            return default
        wanted = value.strip().lower()
        for member in enum_class:
            if str(member.value).lower() == wanted:
                return member
        return default
