import math
from dataclasses import dataclass

from ..config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..errors import ValidationError


@dataclass(frozen=True)
class Pagination:
    """Offset/limit window over a result set ordered newest first.

    Non-positive page or limit values are rejected instead of producing a
    negative offset.
    """
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError("page must be a positive integer")
        if self.limit < 1:
            raise ValidationError("limit must be a positive integer")
        if self.limit > MAX_PAGE_LIMIT:
            raise ValidationError(f"limit must not exceed {MAX_PAGE_LIMIT}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def describe(self, total: int) -> dict:
        return {
            "total": total,
            "page": self.page,
            "limit": self.limit,
            "pages": self.pages(total),
        }
