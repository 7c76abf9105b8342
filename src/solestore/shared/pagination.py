"""Paging and sorting helpers shared by the listing queries."""

import math
from dataclasses import dataclass, field

from protean.exceptions import ValidationError

# Protean querysets cap results at 100 by default; reads go through batches
_BATCH_SIZE = 100


@dataclass
class Page:
    """One 1-indexed page of a listing, plus the metadata clients page with."""

    items: list = field(default_factory=list)
    current_page: int = 1
    page_size: int = 20
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.total_items else 0

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def metadata(self) -> dict:
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
        }


def resolve_page_size(limit, default: int, maximum: int) -> int:
    """Requested page size, defaulted and capped."""
    if limit is None:
        return default
    if limit < 1:
        raise ValidationError({"limit": ["Limit must be at least 1"]})
    return min(limit, maximum)


def paginate(records: list, page: int, page_size: int) -> Page:
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    start = (page - 1) * page_size
    return Page(
        items=records[start : start + page_size],
        current_page=page,
        page_size=page_size,
        total_items=len(records),
    )


def sort_records(records, attribute: str, descending: bool = True) -> list:
    """Sort by attribute; records missing the value go last either way."""
    present = [r for r in records if getattr(r, attribute) is not None]
    missing = [r for r in records if getattr(r, attribute) is None]
    return sorted(present, key=lambda r: getattr(r, attribute), reverse=descending) + missing


def fetch_all(queryset) -> list:
    """Materialise every record a queryset matches."""
    records = []
    offset = 0
    while True:
        result = queryset.offset(offset).limit(_BATCH_SIZE).all()
        records.extend(result.items)
        offset += _BATCH_SIZE
        if offset >= result.total or not result.items:
            return records
