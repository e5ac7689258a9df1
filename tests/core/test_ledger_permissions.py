"""
Manara Permissions - Test Suite
=================================
Tests for: role matrix, admin override, explicit grants,
require_permission, operation types per role.
"""

import pytest


def _user(role, permissions=()):
    from core.permissions import User
    return User(
        user_id=f"U-{role}", username=role, name=role.title(),
        role=role, permissions=permissions,
    )


class TestRolePermissionPolicy:
    def test_admin_may_do_everything(self):
        from core.permissions import (
            AppView, PermissionAction, PermissionContext, RolePermissionPolicy,
        )
        policy = RolePermissionPolicy()
        context = PermissionContext(user=_user("admin"), view=AppView.USERS_MANAGEMENT)
        assert all(policy.has_permission(action, context) for action in PermissionAction)

    def test_sales_may_create_operations(self):
        from core.permissions import PermissionContext, RolePermissionPolicy
        policy = RolePermissionPolicy()
        context = PermissionContext(user=_user("sales"), view="operations")
        assert policy.has_permission("create", context)

    def test_sales_may_not_view_costs_in_reports(self):
        from core.permissions import PermissionContext, RolePermissionPolicy
        policy = RolePermissionPolicy()
        context = PermissionContext(user=_user("sales"), view="reports")
        assert not policy.has_permission("view_costs", context)

    def test_accountant_reports(self):
        from core.permissions import PermissionContext, RolePermissionPolicy
        policy = RolePermissionPolicy()
        context = PermissionContext(user=_user("accountant"), view="reports")
        assert policy.has_permission("view_profit_loss", context)

    def test_view_less_check_uses_explicit_grants(self):
        from core.permissions import PermissionContext, RolePermissionPolicy
        policy = RolePermissionPolicy()
        granted = PermissionContext(user=_user("warehouse", permissions=("export",)))
        bare = PermissionContext(user=_user("warehouse"))
        assert policy.has_permission("export", granted)
        assert not policy.has_permission("export", bare)

    def test_custom_matrix(self):
        from core.permissions import (
            AppView, InMemoryRoleMatrix, PermissionAction, PermissionContext,
            RolePermissionPolicy, UserRole,
        )
        matrix = InMemoryRoleMatrix({
            UserRole.SALES: {AppView.REPORTS: {PermissionAction.VIEW_COSTS}},
        })
        policy = RolePermissionPolicy(provider=matrix)
        context = PermissionContext(user=_user("sales"), view="reports")
        assert policy.has_permission("view_costs", context)

    def test_unknown_action_rejected(self):
        from core.permissions import PermissionContext, RolePermissionPolicy
        context = PermissionContext(user=_user("sales"))
        with pytest.raises(ValueError):
            RolePermissionPolicy().has_permission("fly", context)


class TestRequirePermission:
    def test_denied_raises(self):
        from core.ledger.errors import PermissionDeniedError
        from core.permissions import (
            PermissionContext, RolePermissionPolicy, require_permission,
        )
        context = PermissionContext(user=_user("warehouse"), view="accounting")
        with pytest.raises(PermissionDeniedError) as exc:
            require_permission(RolePermissionPolicy(), "create", context)
        assert exc.value.view == "accounting"
        assert exc.value.action == "create"

    def test_allowed_passes(self):
        from core.permissions import (
            PermissionContext, RolePermissionPolicy, require_permission,
        )
        context = PermissionContext(user=_user("warehouse"), view="sources")
        require_permission(RolePermissionPolicy(), "manage_stocks", context)


class TestOperationTypes:
    def test_per_role(self):
        from core.permissions import RolePermissionPolicy
        from core.primitives.ledger import TransactionType
        assert RolePermissionPolicy.allowed_operation_types(_user("sales")) == (
            TransactionType.SALE,
        )
        assert TransactionType.LOSS in RolePermissionPolicy.allowed_operation_types(
            _user("warehouse")
        )
        assert RolePermissionPolicy.allowed_operation_types(_user("accountant")) == ()


class TestUserRecord:
    def test_record_restores_user(self):
        from core.permissions import User
        user = _user("sales", permissions=("print",))
        assert User.from_record(user.to_record()) == user
