"""Utility Module.

This module contains small helper functions used across the project.
"""
from typing import Any


def format_type_error(
    obj: object,
    expected_types: type[Any] | tuple[type[Any], ...],
    suffix: str = '',
) -> str:
    """Generate a formatted error message for a type mismatch.

    Args:
        obj (object): The object whose type is being checked.
        expected_types (type[Any] | tuple[type[Any], ...]): The expected type(s) for the object.
        suffix (str): An optional suffix to append to the error message.

    Returns:
        str: The formatted error message.
    """
    actual_type = type(obj).__name__

    if isinstance(expected_types, tuple):
        expected_types_names = ' | '.join(t.__name__ for t in expected_types)
        expected_type_count = len(expected_types)
    else:
        expected_types_names = expected_types.__name__
        expected_type_count = 1

    return f'Expected type{pluralize(expected_type_count)} {expected_types_names}, got {actual_type} instead.{suffix}'


def pluralize(count: int, singular: str = '', plural: str = 's') -> str:
    return singular if count == 1 else plural
