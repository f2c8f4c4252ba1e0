"""
Authorization use cases built on the AuthorizationService.
"""

from typing import List

from identity_api.domain.services import AuthorizationService
from identity_api.domain.value_objects import UserId
from identity_api.errors import IdentityError
from identity_api.mappers import PermissionMapper
from identity_api.result import Ok, Result
from identity_api.schemas.permissions import PermissionCheckResponse, PermissionResponse
from identity_api.services.base import BaseUseCase


class CheckPermissionUseCase(BaseUseCase):
    """Answer whether a user may perform an action on a resource."""

    def __init__(self, authorization_service: AuthorizationService):
        super().__init__()
        self.authorization_service = authorization_service

    async def execute(self, user_id: str, resource: str, action: str) -> Result[PermissionCheckResponse, IdentityError]:
        """
        Evaluate a permission check.

        Args:
            user_id: User to check
            resource: Requested resource
            action: Requested action

        Returns:
            Ok(PermissionCheckResponse), Err(ValidationError) for a malformed
            id, or Err(NotFoundError) for a missing user or role
        """
        id_result = UserId.from_string(user_id)
        if id_result.is_err():
            return id_result

        allowed_result = await self.authorization_service.user_has_permission(id_result.value, resource, action)
        if allowed_result.is_err():
            return allowed_result

        return Ok(PermissionCheckResponse(
            user_id=id_result.value.value,
            resource=resource,
            action=action,
            allowed=allowed_result.value,
        ))


class GetUserPermissionsUseCase(BaseUseCase):
    """List a user's effective permissions."""

    def __init__(self, authorization_service: AuthorizationService):
        super().__init__()
        self.authorization_service = authorization_service

    async def execute(self, user_id: str) -> Result[List[PermissionResponse], IdentityError]:
        id_result = UserId.from_string(user_id)
        if id_result.is_err():
            return id_result

        permissions_result = await self.authorization_service.get_user_permissions(id_result.value)
        if permissions_result.is_err():
            return permissions_result
        return Ok(PermissionMapper.to_dto_list(permissions_result.value))
