"""
Tracked entity kinds and their restore dependencies.

Each kind is declared once with the kinds it references. Insert and delete
orders are derived from these declarations by a topological sort, so adding a
kind means adding one TrackedKind entry.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from django.apps import apps

_CAMEL_BOUNDARY = re.compile(r"_([a-z0-9])")


def to_wire_key(attname: str) -> str:
    """Convert a model attribute name to its document key (cost_price -> costPrice)."""
    return _CAMEL_BOUNDARY.sub(lambda match: match.group(1).upper(), attname)


@dataclass(frozen=True)
class TrackedKind:
    """
    One entity kind carried in every snapshot.

    Attributes:
        key: Key of the kind's array under the document's "data" object
        model_label: "app_label.ModelName" of the backing model
        depends_on: Keys of kinds this kind references
        restorable: False for kinds that are exported but never restored
        defaults: Document-key defaults for fields missing from legacy documents
        fields: Explicit (document key, attribute) projection; None means every
            concrete field under its camelCase name
    """

    key: str
    model_label: str
    depends_on: Tuple[str, ...] = ()
    restorable: bool = True
    defaults: Dict[str, object] = field(default_factory=dict, hash=False, compare=False)
    fields: Optional[Tuple[Tuple[str, str], ...]] = None

    @property
    def model(self):
        return apps.get_model(self.model_label)

    def field_map(self) -> List[Tuple[str, str]]:
        """Return (document key, model attribute) pairs for this kind."""
        if self.fields is not None:
            return list(self.fields)
        return [(to_wire_key(f.attname), f.attname) for f in self.model._meta.concrete_fields]


USER_FIELDS = (
    ("id", "id"),
    ("email", "email"),
    ("name", "name"),
    ("phone", "phone"),
    ("role", "role"),
    ("image", "image"),
    ("provider", "provider"),
    ("notifications", "notifications"),
    ("isActive", "is_active"),
    ("createdAt", "date_joined"),
    ("updatedAt", "updated_at"),
)

TRACKED_KINDS: Tuple[TrackedKind, ...] = (
    TrackedKind("categories", "inventory.Category"),
    TrackedKind("products", "inventory.Product", defaults={"costPrice": Decimal("0")}),
    TrackedKind("customers", "crm.Customer", defaults={"totalDebt": Decimal("0")}),
    TrackedKind(
        "sales",
        "sales.Sale",
        depends_on=("customers", "products"),
        defaults={"costPriceSnapshot": Decimal("0")},
    ),
    TrackedKind(
        "credits",
        "crm.Credit",
        depends_on=("customers",),
        defaults={"amountPaid": Decimal("0")},
    ),
    TrackedKind("profits", "sales.Profit"),
    TrackedKind("activities", "core.Activity"),
    # Users are exported as a summary only and never deleted by a restore
    TrackedKind("users", "core.User", restorable=False, fields=USER_FIELDS),
)

# Keys that must be present for a document to be restorable at all
REQUIRED_KEYS = ("products", "customers")


def kind_keys() -> List[str]:
    return [kind.key for kind in TRACKED_KINDS]


def get_kind(key: str) -> TrackedKind:
    for kind in TRACKED_KINDS:
        if kind.key == key:
            return kind
    raise KeyError(key)


def topological_order(kinds: Sequence[TrackedKind]) -> List[TrackedKind]:
    """
    Order kinds so that every kind comes after the kinds it depends on.

    Among kinds that are ready at the same time, declaration order wins, which
    keeps the result stable across runs.

    Raises:
        ValueError: On an unknown dependency or a dependency cycle
    """
    by_key = {kind.key: kind for kind in kinds}
    for kind in kinds:
        for parent in kind.depends_on:
            if parent not in by_key:
                raise ValueError(f"{kind.key} depends on unknown kind {parent}")

    ordered: List[TrackedKind] = []
    placed = set()
    remaining = list(kinds)
    while remaining:
        ready = next(
            (kind for kind in remaining if all(p in placed for p in kind.depends_on)),
            None,
        )
        if ready is None:
            cycle = ", ".join(kind.key for kind in remaining)
            raise ValueError(f"Dependency cycle between tracked kinds: {cycle}")
        ordered.append(ready)
        placed.add(ready.key)
        remaining.remove(ready)
    return ordered


def restore_order() -> List[TrackedKind]:
    """Parents before children; the order rows are inserted in."""
    return topological_order([kind for kind in TRACKED_KINDS if kind.restorable])


def delete_order() -> List[TrackedKind]:
    """Children before parents; the order existing rows are removed in."""
    return list(reversed(restore_order()))
