"""
Manara Entity Registry - Public API
=====================================
"""

from core.registry.registry import (
    ENTITY_CLASSES,
    EntityKind,
    EntityRegistry,
    RegistryAction,
    RegistryChange,
    kind_of,
)

__all__ = [
    "ENTITY_CLASSES",
    "EntityKind",
    "EntityRegistry",
    "RegistryAction",
    "RegistryChange",
    "kind_of",
]
