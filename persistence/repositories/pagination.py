"""Page of rows returned by FilterableRepository.paginate()."""

from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from shared.config.constants import Limits

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class Page(Generic[RowT]):
    """One page of a filtered query."""

    items: Sequence[RowT]
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        if self.total == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": list(self.items),
            "page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "pages": self.pages,
        }


def normalize_page(page: int, per_page: int) -> tuple[int, int]:
    """Clamp page to >= 1 and per_page to [1, MAX_PAGE_SIZE]."""
    per_page = min(max(1, per_page), Limits.MAX_PAGE_SIZE)
    return max(1, page), per_page
