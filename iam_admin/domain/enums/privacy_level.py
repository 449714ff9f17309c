"""Visibility classification layered over isolation scope.

- PROTECTED: visible only to accessors sharing a department with the record
- SHARED: visible to any accessor in the same tenant and organization
- CONFIDENTIAL: visible only to the owning user
"""

from enum import Enum


class PrivacyLevel(str, Enum):
    """Privacy level of a scoped record."""

    PROTECTED = "PROTECTED"
    SHARED = "SHARED"
    CONFIDENTIAL = "CONFIDENTIAL"
