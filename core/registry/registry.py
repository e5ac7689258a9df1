"""
Manara Entity Registry
========================
Reference data: products, customers, suppliers, warehouses,
branches, safes, employees, users.

Pure storage with identity-based lookup. One ordered map per kind;
list() returns entities in registration order. No referential
integrity is checked here; the LedgerStore reports dangling
references when an entity is removed, and journals every add and
removal as a RegistryChange so replay can rebuild the history.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from core.ledger.errors import DuplicateEntityError
from core.permissions.models import User
from core.primitives.inventory import Branch, Warehouse
from core.primitives.item import Product
from core.primitives.ledger import Safe
from core.primitives.party import Customer, Employee, Supplier


class EntityKind(Enum):
    """Value is the collection key of the persisted snapshot."""
    PRODUCT = "products"
    CUSTOMER = "customers"
    SUPPLIER = "suppliers"
    WAREHOUSE = "warehouses"
    BRANCH = "branches"
    SAFE = "safes"
    EMPLOYEE = "employees"
    USER = "users"


ENTITY_CLASSES = {
    EntityKind.PRODUCT: Product,
    EntityKind.CUSTOMER: Customer,
    EntityKind.SUPPLIER: Supplier,
    EntityKind.WAREHOUSE: Warehouse,
    EntityKind.BRANCH: Branch,
    EntityKind.SAFE: Safe,
    EntityKind.EMPLOYEE: Employee,
    EntityKind.USER: User,
}

_KIND_BY_CLASS = {cls: kind for kind, cls in ENTITY_CLASSES.items()}


def kind_of(entity) -> EntityKind:
    kind = _KIND_BY_CLASS.get(type(entity))
    if kind is None:
        raise TypeError(f"{type(entity).__name__} is not a registry entity.")
    return kind


class EntityRegistry:

    def __init__(self):
        self._entities: Dict[EntityKind, Dict[str, object]] = {
            kind: {} for kind in EntityKind
        }

    def add(self, entity) -> None:
        kind = kind_of(entity)
        bucket = self._entities[kind]
        if entity.identity in bucket:
            raise DuplicateEntityError(kind.value, entity.identity)
        bucket[entity.identity] = entity

    def update(self, entity) -> Optional[object]:
        """Replace by identity. Returns the previous record, None if unknown."""
        bucket = self._entities[kind_of(entity)]
        previous = bucket.get(entity.identity)
        if previous is not None:
            bucket[entity.identity] = entity
        return previous

    def remove(self, kind: EntityKind, entity_id: str) -> Optional[object]:
        return self._entities[kind].pop(entity_id, None)

    def get(self, kind: EntityKind, entity_id: Optional[str]) -> Optional[object]:
        if entity_id is None:
            return None
        return self._entities[kind].get(entity_id)

    def contains(self, kind: EntityKind, entity_id: Optional[str]) -> bool:
        return entity_id is not None and entity_id in self._entities[kind]

    def list(self, kind: EntityKind) -> Tuple[object, ...]:
        return tuple(self._entities[kind].values())

    def count(self, kind: EntityKind) -> int:
        return len(self._entities[kind])


# ══════════════════════════════════════════════════════════════
# REGISTRY JOURNAL - adds and removals placed between log positions
# ══════════════════════════════════════════════════════════════

class RegistryAction(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class RegistryChange:
    """
    One registration or removal, placed in the ledger history.

    position is the log length when the change happened: the change
    precedes the transaction at that position. An ADD carries the
    entity as registered, so its opening stock or balance is kept
    even if the entity is later removed or updated.
    """
    sequence: int
    position: int
    action: RegistryAction
    kind: EntityKind
    entity_id: str
    entity: Optional[object] = None

    def __post_init__(self):
        if not isinstance(self.action, RegistryAction):
            object.__setattr__(self, "action", RegistryAction(self.action))
        if not isinstance(self.kind, EntityKind):
            object.__setattr__(self, "kind", EntityKind(self.kind))
        if self.position < 0:
            raise ValueError("position must be non-negative.")
        if self.action == RegistryAction.ADD and self.entity is None:
            raise ValueError("an ADD change must carry its entity.")

    def to_record(self) -> dict:
        return {
            "id": str(self.sequence),
            "position": self.position,
            "action": self.action.value,
            "kind": self.kind.value,
            "entityId": self.entity_id,
            "entity": None if self.entity is None else self.entity.to_record(),
        }

    @classmethod
    def from_record(cls, data: dict) -> RegistryChange:
        kind = EntityKind(data["kind"])
        entity = data.get("entity")
        return cls(
            sequence=int(data["id"]),
            position=int(data["position"]),
            action=RegistryAction(data["action"]),
            kind=kind,
            entity_id=data["entityId"],
            entity=None if entity is None else ENTITY_CLASSES[kind].from_record(entity),
        )
