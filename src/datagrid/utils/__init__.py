"""
Utility functions for datagrid.

This module provides utilities for working with tables:
- serialization: versioned JSON serialization/deserialization of tables
"""

from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    SERIALIZATION_VERSION
)

__all__ = [
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'SERIALIZATION_VERSION'
]
