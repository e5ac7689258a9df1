"""
Manara Permissions - Roles, Actions, Views, Users
===================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(Enum):
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    SALES = "sales"
    WAREHOUSE = "warehouse"


class PermissionAction(Enum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PRINT = "print"
    EXPORT = "export"
    VIEW_COSTS = "view_costs"
    VIEW_PROFIT_LOSS = "view_profit_loss"
    VIEW_ALERTS = "view_alerts"
    GIVE_DISCOUNT = "give_discount"
    MANAGE_PRICES = "manage_prices"
    MANAGE_STOCKS = "manage_stocks"
    VOID_TRANSACTION = "void_transaction"
    EDIT_CLOSED_PERIOD = "edit_closed_period"


class AppView(Enum):
    DASHBOARD = "dashboard"
    SOURCES = "sources"
    OPERATIONS = "operations"
    REPORTS = "reports"
    EMPLOYEES = "employees"
    ACCOUNTING = "accounting"
    REGISTRY = "registry"
    STATEMENTS = "statements"
    USERS_MANAGEMENT = "users_management"


@dataclass(frozen=True)
class User:
    """
    Application user.

    permissions are explicit grants outside any view; they are only
    consulted for view-less capability checks.
    """
    user_id: str
    username: str
    name: str
    role: UserRole
    permissions: tuple[PermissionAction, ...] = ()
    branch_id: Optional[str] = None

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")

        if not self.username or not isinstance(self.username, str):
            raise ValueError("username must be a non-empty string.")

        if not isinstance(self.role, UserRole):
            object.__setattr__(self, "role", UserRole(self.role))

        normalized = tuple(
            p if isinstance(p, PermissionAction) else PermissionAction(p)
            for p in self.permissions
        )
        object.__setattr__(self, "permissions", normalized)

    @property
    def identity(self) -> str:
        return self.user_id

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_record(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "name": self.name,
            "role": self.role.value,
            "permissions": [p.value for p in self.permissions],
            "branchId": self.branch_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> User:
        return cls(
            user_id=data["id"],
            username=data["username"],
            name=data.get("name") or data["username"],
            role=UserRole(data["role"]),
            permissions=tuple(data.get("permissions") or ()),
            branch_id=data.get("branchId"),
        )
