# core/query.py
"""
Pagination, sort and search state for one table view, and its translation
into json-server query parameters.

QueryState is owned by the view that displays the table. Every change to
the search text, sort column, sort order, page size or filters sends the
view back to page 1.
"""
from __future__ import annotations

import datetime
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

SORT_ORDERS = ("asc", "desc")

ParamValue = Union[str, int, float]


def total_pages(total_items: int, page_size: int) -> int:
    """ceil(total_items / page_size); zero items means zero pages."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    if total_items <= 0:
        return 0
    return math.ceil(total_items / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Keep a page number inside 1..max(1, pages)."""
    return min(max(1, page), max(1, pages))


@dataclass
class QueryState:
    page: int = 1
    page_size: int = 10
    search_text: str = ""
    sort_column: Optional[str] = None
    sort_order: str = "asc"
    filters: Dict[str, Any] = field(default_factory=dict)
    preset: Optional[str] = None
    # what the active preset put in place, removed again on a manual filter
    _preset_filter_keys: Tuple[str, ...] = field(default=(), init=False, repr=False)
    _preset_sort: Optional[Tuple[str, str]] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(f"sort_order must be one of {SORT_ORDERS}")

    # === mutators ===

    def set_search(self, text: str) -> None:
        self.search_text = text or ""
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        page_size = int(page_size)
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.page = 1

    def toggle_sort(self, column: str) -> None:
        """Header click: same column flips the order, a new column starts ascending."""
        if self.sort_column == column:
            self.sort_order = "desc" if self.sort_order == "asc" else "asc"
        else:
            self.sort_column = column
            self.sort_order = "asc"
        self.page = 1

    def set_sort(self, column: Optional[str], order: str = "asc") -> None:
        if order not in SORT_ORDERS:
            raise ValueError(f"sort_order must be one of {SORT_ORDERS}")
        self.sort_column = column
        self.sort_order = order
        self.page = 1

    def set_filter(self, name: str, value: Any) -> None:
        """
        Set (or, with an empty value, remove) one FIELD / FIELD_gte / FIELD_lte filter.

        A manual filter replaces the active preset: the preset's own filters
        and sort are dropped so the query matches what the toolbar shows.
        """
        self._leave_preset()
        if value is None or value == "" or value == []:
            self.filters.pop(name, None)
        else:
            self.filters[name] = value
        self.page = 1

    def clear_filters(self) -> None:
        self._leave_preset()
        self.filters = {}
        self.page = 1

    def apply_preset(self, preset, today: Optional[datetime.date] = None) -> None:
        """Replace filters and sort with a schema QueryPreset."""
        self.filters = preset.resolve_filters(today or datetime.date.today())
        self.sort_column = preset.sort_column
        self.sort_order = preset.sort_order if preset.sort_column else "asc"
        self.preset = preset.key
        self._preset_filter_keys = tuple(self.filters)
        self._preset_sort = (self.sort_column, self.sort_order) if self.sort_column else None
        self.page = 1

    def _leave_preset(self) -> None:
        if self.preset is None:
            return
        for key in self._preset_filter_keys:
            self.filters.pop(key, None)
        # a sort the user picked after the preset is kept
        if self._preset_sort is not None and (self.sort_column, self.sort_order) == self._preset_sort:
            self.sort_column = None
            self.sort_order = "asc"
        self.preset = None
        self._preset_filter_keys = ()
        self._preset_sort = None

    def go_to_page(self, page: int) -> None:
        if page < 1:
            raise ValueError("page must be >= 1")
        self.page = page

    # === REST translation ===

    def to_params(self) -> List[Tuple[str, ParamValue]]:
        """
        Build the query string for a list call.

        Returned as ordered pairs so multi-valued filters turn into repeated
        parameters (``department=A&department=B``).
        """
        params: List[Tuple[str, ParamValue]] = [("_page", self.page), ("_limit", self.page_size)]
        if self.search_text:
            params.append(("q", self.search_text))
        if self.sort_column:
            params.append(("_sort", self.sort_column))
            params.append(("_order", self.sort_order))
        for name, value in self.filters.items():
            if isinstance(value, (list, tuple, set)):
                params.extend((name, item) for item in value)
            else:
                params.append((name, value))
        return params


@dataclass(frozen=True)
class PageSummary:
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @classmethod
    def build(cls, state: QueryState, total_items: int) -> "PageSummary":
        return cls(
            page=state.page,
            page_size=state.page_size,
            total_items=total_items,
            total_pages=total_pages(total_items, state.page_size),
        )

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def first_item(self) -> int:
        if self.total_items == 0:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_item(self) -> int:
        return min(self.page * self.page_size, self.total_items)

    @property
    def label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"
