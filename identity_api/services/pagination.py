"""
Pagination parameter validation and response envelopes.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, TypeVar

from identity_api.errors import ValidationError
from identity_api.result import Err, Ok, Result
from identity_api.schemas.base import PaginatedResponse, PaginationMeta


T = TypeVar('T')

DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100
DEFAULT_OFFSET = 0


@dataclass(frozen=True)
class PaginationParams:
    """Validated limit/offset pair."""

    limit: int
    offset: int


class PaginationService:
    """Validates pagination input and builds paginated envelopes."""

    @staticmethod
    def validate_params(
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Result[PaginationParams, ValidationError]:
        """
        Validate pagination parameters, applying defaults.

        Args:
            limit: Page size, 1-100, defaults to 20
            offset: Items to skip, >= 0, defaults to 0

        Returns:
            Ok(PaginationParams) or Err(ValidationError) tagged ``limit``/``offset``
        """
        resolved_limit = DEFAULT_LIMIT if limit is None else limit
        resolved_offset = DEFAULT_OFFSET if offset is None else offset

        if resolved_limit < MIN_LIMIT or resolved_limit > MAX_LIMIT:
            return Err(ValidationError(
                "limit", f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}"
            ))

        if resolved_offset < 0:
            return Err(ValidationError("offset", "Offset must be greater than or equal to 0"))

        return Ok(PaginationParams(limit=resolved_limit, offset=resolved_offset))

    @staticmethod
    def build_meta(total: int, limit: int, offset: int) -> PaginationMeta:
        return PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
            current_page=offset // limit + 1,
            total_pages=math.ceil(total / limit) if total > 0 else 0,
        )

    @classmethod
    def build_response(
        cls,
        data: List[T],
        total: int,
        limit: int,
        offset: int,
    ) -> PaginatedResponse[T]:
        """
        Wrap one page of items with pagination metadata.

        Args:
            data: Items of the current page
            total: Total number of items
            limit: Page size used for the query
            offset: Offset used for the query

        Returns:
            Paginated response envelope
        """
        return PaginatedResponse(data=data, pagination=cls.build_meta(total, limit, offset))
