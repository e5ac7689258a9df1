"""
Manara Permissions - Capability Check
=======================================
The ledger core is policy-agnostic. Callers consult a
PermissionChecker before invoking a mutator; require_permission
turns a failed check into PermissionDeniedError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Union

from core.ledger.errors import PermissionDeniedError
from core.permissions.models import AppView, PermissionAction, User, UserRole
from core.permissions.provider import InMemoryRoleMatrix, RoleMatrixProvider
from core.primitives.ledger import TransactionType

logger = logging.getLogger("manara.permissions")

ActionLike = Union[PermissionAction, str]

ALLOWED_OPERATION_TYPES = {
    UserRole.ADMIN: (
        TransactionType.SALE,
        TransactionType.PURCHASE,
        TransactionType.TRANSFER,
        TransactionType.LOSS,
    ),
    UserRole.SALES: (TransactionType.SALE,),
    UserRole.WAREHOUSE: (TransactionType.TRANSFER, TransactionType.LOSS),
}


@dataclass(frozen=True)
class PermissionContext:
    user: User
    view: Optional[AppView] = None

    def __post_init__(self):
        if not isinstance(self.user, User):
            raise ValueError("user must be a User.")
        if self.view is not None and not isinstance(self.view, AppView):
            object.__setattr__(self, "view", AppView(self.view))


class PermissionChecker(Protocol):
    def has_permission(self, action: ActionLike, context: PermissionContext) -> bool:
        ...


class RolePermissionPolicy:
    """
    Admin may do everything. A view-less check is answered by the
    user's explicit grants; a view check by the role matrix.
    """

    def __init__(self, provider: RoleMatrixProvider | None = None):
        self._provider = provider or InMemoryRoleMatrix()

    def has_permission(self, action: ActionLike, context: PermissionContext) -> bool:
        if not isinstance(action, PermissionAction):
            action = PermissionAction(action)

        user = context.user
        if user.is_admin:
            return True

        if context.view is None:
            return action in user.permissions

        return action in self._provider.actions_for(user.role, context.view)

    @staticmethod
    def allowed_operation_types(user: User) -> tuple[TransactionType, ...]:
        """Operation types the user may record from the operations view."""
        return ALLOWED_OPERATION_TYPES.get(user.role, ())


def require_permission(
    checker: PermissionChecker,
    action: ActionLike,
    context: PermissionContext,
) -> None:
    if checker.has_permission(action, context):
        return
    action_name = action.value if isinstance(action, PermissionAction) else action
    view_name = context.view.value if context.view else None
    logger.warning(
        f"Permission denied: user={context.user.user_id} "
        f"action={action_name} view={view_name}"
    )
    raise PermissionDeniedError(context.user.user_id, action_name, view_name)
