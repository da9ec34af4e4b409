"""
Enum conversion utilities.

Parses strings into enums with support for case-insensitive matching
and fallback defaults.
"""

from typing import Any, Type, TypeVar

T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], default: T, normalize: bool = False) -> T:
    """
    Parse value to enum with fallback to default.

    Args:
        value: Value to parse (string, enum, or None)
        enum_class: Enum class to parse to
        default: Default enum value if parsing fails
        normalize: Whether to lowercase string before parsing
            (for case-insensitive matching)

    Returns:
        Parsed enum value or default

    Example:
        >>> parse_enum("TOP-LEFT", Gravity, Gravity.CENTER, normalize=True)
        >>> # Returns Gravity.TOP_LEFT
        >>> parse_enum("face", Gravity, Gravity.CENTER)
        >>> # Returns Gravity.CENTER
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    # None or missing value
    if value is None:
        return default

    # String value - try to parse
    try:
        str_value = value.lower() if normalize else value
        return enum_class(str_value)
    except (ValueError, AttributeError):
        return default
