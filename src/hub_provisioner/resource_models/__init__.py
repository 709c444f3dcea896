"""
Resource models for hub_provisioner.

This package provides Pydantic data models describing the repositories and
the auxiliary file that are fetched into the target root.
"""

from .resources import (
    Resource,
    AuxiliaryAsset,
    validate_relative_name,
)

__all__ = [
    "Resource",
    "AuxiliaryAsset",
    "validate_relative_name",
]
