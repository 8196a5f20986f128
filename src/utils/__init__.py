"""
Utility functions for Asset Link
"""

from .field_parser import FieldParser

__all__ = [
    'FieldParser',
]
