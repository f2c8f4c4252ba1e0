"""
Base use case class with shared orchestration helpers.

Use cases expose a single async ``execute`` method returning a
``Result``. Expected failures come back as ``Err``; anything raised is
an unexpected failure and propagates.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from identity_api.domain.repositories import PermissionRepository
from identity_api.domain.value_objects import PermissionId
from identity_api.errors import IdentityError, NotFoundError
from identity_api.result import Err, Ok, Result, combine
from identity_api.schemas.base import PaginatedResponse
from identity_api.services.pagination import PaginationService


T = TypeVar('T')
ResponseT = TypeVar('ResponseT')


class BaseUseCase(ABC):
    """
    Base class for application use cases.

    Provides logging and the paginated-list and permission-reference
    helpers several use cases share.
    """

    def __init__(self):
        """Initialize the base use case."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> Result[Any, IdentityError]:
        """Run the use case."""

    def _log_operation(self, operation: str, resource_type: str, **kwargs) -> None:
        """
        Log use case operations.

        Args:
            operation: Operation being performed (create, update, delete, etc.)
            resource_type: Type of resource being operated on
            **kwargs: Additional context to log
        """
        self.logger.info(
            f"{operation} {resource_type}",
            extra={
                "event_type": f"{resource_type.lower()}_{operation}",
                "operation": operation,
                "resource_type": resource_type,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **kwargs
            }
        )

    def _log_failure(self, operation: str, resource_type: str, error: IdentityError) -> None:
        self.logger.warning(
            f"{operation} {resource_type} failed: {error.message}",
            extra={
                "event_type": f"{resource_type.lower()}_{operation}_failed",
                "operation": operation,
                "resource_type": resource_type,
                "error_code": error.error_code,
                **error.metadata,
            }
        )

    async def _paginate(
        self,
        limit: Optional[int],
        offset: Optional[int],
        find_all: Callable[[int, int], Any],
        count: Callable[[], Any],
        to_dto: Callable[[Iterable[T]], List[ResponseT]],
    ) -> Result[PaginatedResponse[ResponseT], IdentityError]:
        """
        Validate pagination, then fetch a page and the total concurrently.

        Nothing is queried when the parameters are invalid.

        Args:
            limit: Requested page size
            offset: Requested offset
            find_all: Repository ``find_all`` coroutine function
            count: Repository ``count`` coroutine function
            to_dto: Mapper turning entities into response schemas

        Returns:
            Ok(PaginatedResponse) or the first Err
        """
        params_result = PaginationService.validate_params(limit, offset)
        if params_result.is_err():
            return params_result
        params = params_result.value

        items_result, total_result = await asyncio.gather(
            find_all(params.limit, params.offset),
            count(),
        )
        if items_result.is_err():
            return items_result
        if total_result.is_err():
            return total_result

        return Ok(PaginationService.build_response(
            to_dto(items_result.value),
            total_result.value,
            params.limit,
            params.offset,
        ))


async def resolve_permission_ids(
    permission_repository: PermissionRepository,
    raw_ids: Iterable[str],
) -> Result[List[PermissionId], IdentityError]:
    """
    Parse permission ids and make sure every one of them exists.

    Args:
        permission_repository: Repository used for the bulk lookup
        raw_ids: Ids as supplied by the caller

    Returns:
        Ok(list of PermissionId), Err(ValidationError) for a malformed id,
        or Err(NotFoundError) listing every id that does not resolve
    """
    parsed = combine(PermissionId.from_string(raw_id) for raw_id in raw_ids)
    if parsed.is_err():
        return parsed
    permission_ids: List[PermissionId] = parsed.value

    if not permission_ids:
        return Ok([])

    found_result = await permission_repository.find_by_ids(permission_ids)
    if found_result.is_err():
        return found_result

    found = {permission.id for permission in found_result.value}
    missing = [permission_id.value for permission_id in permission_ids if permission_id not in found]
    if missing:
        return Err(NotFoundError(
            "Permission",
            ",".join(missing),
            metadata={"missing_ids": missing},
            missing_ids=missing,
        ))

    return Ok(permission_ids)
