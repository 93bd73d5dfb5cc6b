"""Reason code constants for remap decisions.

These constants prevent stringly-typed reasons and ensure
client code matches on the correct values.
"""

from enum import Enum


class RemapReason(str, Enum):
    """Why a CRD was demoted to the legacy API version."""

    # First spec.versions entry carries no openAPIV3Schema
    SCHEMA_ABSENT = "SCHEMA_ABSENT"
    # status.conditions contains a NonStructuralSchema entry
    NON_STRUCTURAL_SCHEMA = "NON_STRUCTURAL_SCHEMA"
