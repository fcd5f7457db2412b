"""
Entity resolution and upsert engine.

This module provides path normalization, the shared resolution cache, prefix
stripping and the create-or-update engine used by every importer.
"""

from press_import.core.cache import ResolutionCache
from press_import.core.entity import (
    EntityRecord,
    EntityTraits,
    PostRecord,
    TermRecord,
    UserRecord,
)
from press_import.core.fields import META_FIELD, FieldSet
from press_import.core.path import ROOT, ContentPath
from press_import.core.prefix import PrefixResolver
from press_import.core.status import STATUS_LABELS, SaveStatus

__all__ = [
    # Paths
    "ContentPath",
    "ROOT",
    "PrefixResolver",
    # Cache
    "ResolutionCache",
    # Records
    "EntityRecord",
    "EntityTraits",
    "PostRecord",
    "TermRecord",
    "UserRecord",
    "FieldSet",
    "META_FIELD",
    # Status
    "SaveStatus",
    "STATUS_LABELS",
]
