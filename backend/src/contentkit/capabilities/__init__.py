"""Capabilities composable onto models."""

from contentkit.capabilities.authorable import Authorable
from contentkit.capabilities.base import Capability, include_property
from contentkit.capabilities.hierarchical import Hierarchical, MasterField
from contentkit.capabilities.revisionable import Revisionable
from contentkit.capabilities.routable import Routable
from contentkit.capabilities.soft_delete import SOFT_DELETE_PROPERTIES, SoftDeletable
from contentkit.capabilities.timestampable import Timestampable

__all__ = [
    "Authorable",
    "Capability",
    "Hierarchical",
    "MasterField",
    "Revisionable",
    "Routable",
    "SOFT_DELETE_PROPERTIES",
    "SoftDeletable",
    "Timestampable",
    "include_property",
]
