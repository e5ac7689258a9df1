"""
Manara Permissions - Role Matrix Provider
===========================================
Which actions each role may take on each view.
"""

from __future__ import annotations

from typing import Mapping, Protocol

from core.permissions.models import AppView, PermissionAction, UserRole

A = PermissionAction
V = AppView

DEFAULT_ROLE_MATRIX: Mapping[UserRole, Mapping[AppView, frozenset]] = {
    UserRole.ACCOUNTANT: {
        V.DASHBOARD: frozenset({A.VIEW, A.VIEW_ALERTS}),
        V.ACCOUNTING: frozenset({A.VIEW, A.CREATE, A.EXPORT}),
        V.REPORTS: frozenset({
            A.VIEW, A.EXPORT, A.PRINT, A.VIEW_COSTS, A.VIEW_PROFIT_LOSS,
        }),
        V.STATEMENTS: frozenset({A.VIEW, A.PRINT, A.EXPORT}),
        V.REGISTRY: frozenset({A.VIEW}),
    },
    UserRole.SALES: {
        V.DASHBOARD: frozenset({A.VIEW}),
        V.OPERATIONS: frozenset({A.VIEW, A.CREATE}),
        V.REGISTRY: frozenset({A.VIEW}),
        V.SOURCES: frozenset({A.VIEW, A.CREATE}),
    },
    UserRole.WAREHOUSE: {
        V.DASHBOARD: frozenset({A.VIEW, A.VIEW_ALERTS}),
        V.SOURCES: frozenset({
            A.VIEW, A.CREATE, A.UPDATE, A.MANAGE_STOCKS,
        }),
        V.OPERATIONS: frozenset({A.VIEW, A.CREATE}),
        V.REGISTRY: frozenset({A.VIEW}),
    },
}


class RoleMatrixProvider(Protocol):
    def actions_for(self, role: UserRole, view: AppView) -> frozenset:
        ...


class InMemoryRoleMatrix:
    """
    Deterministic in-memory matrix. Admin is not listed; the policy
    grants it everything before the matrix is consulted.
    """

    def __init__(self, matrix: Mapping[UserRole, Mapping[AppView, frozenset]] = None):
        source = DEFAULT_ROLE_MATRIX if matrix is None else matrix
        self._matrix = {
            role: {view: frozenset(actions) for view, actions in views.items()}
            for role, views in source.items()
        }

    def actions_for(self, role: UserRole, view: AppView) -> frozenset:
        return self._matrix.get(role, {}).get(view, frozenset())
