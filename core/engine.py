# core/engine.py
"""
RecordView: the view-state object behind one record table.

It owns the QueryState, the ModalWorkflow, the rows of the last applied
fetch and the reload generation counter. A screen creates one RecordView
when the user navigates to a record kind and drops it on navigating away.

Every reload takes a new generation number; when its response arrives it is
applied only if no newer reload has started in the meantime, so a slow
earlier response can never overwrite a fresher table.
"""
from __future__ import annotations

import datetime
import logging
from typing import Any, Callable, List, Optional, Union

import httpx

from core.errors import ReadError
from core.modal import ModalWorkflow
from core.query import PageSummary, QueryState, clamp_page
from core.settings import Settings
from core.store import Record, RecordId, RecordStore
from core.validation import Validator, validator_for
from schemas.entity import EntitySchema, RecordKind
from schemas.registry import get_schema

log = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data. Please check if json-server is running."


class RecordView:
    def __init__(
        self,
        schema: EntitySchema,
        store: RecordStore,
        validator: Validator,
        page_size: int = 10,
        today: Callable[[], datetime.date] = datetime.date.today,
    ):
        self.schema = schema
        self.store = store
        self._today = today
        self.query = QueryState(page_size=page_size)
        self.modal = ModalWorkflow(schema, store, validator, on_change=self.reload, today=today)

        self.rows: List[Record] = []
        self.summary: PageSummary = PageSummary.build(self.query, 0)
        self.error: Optional[str] = None
        self.loading: bool = False
        self.loaded: bool = False
        self.generation: int = 0

    # === loading ===

    async def reload(self) -> bool:
        """
        Fetch the current page. Returns False when the response was stale
        or the fetch failed.

        A failed fetch keeps the previous rows but sets ``error``; nothing
        retries until the next user action.
        """
        self.generation += 1
        generation = self.generation
        self.loading = True
        params = self.query.to_params()

        try:
            result = await self.store.list(params)
        except ReadError as e:
            if generation != self.generation:
                log.debug("Dropping stale failure for generation %s", generation)
                return False
            log.warning("Loading %s failed: %s", self.schema.resource_path, e)
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            return False

        if generation != self.generation:
            log.debug(
                "Dropping stale %s response (generation %s, current %s)",
                self.schema.resource_path, generation, self.generation,
            )
            return False

        summary = PageSummary.build(self.query, result.total_count)
        if self.query.page > max(1, summary.total_pages):
            # e.g. the last row of the last page was deleted
            self.query.go_to_page(clamp_page(self.query.page, summary.total_pages))
            log.debug("Page out of range, refetching page %s", self.query.page)
            return await self.reload()

        self.rows = result.records
        self.summary = summary
        self.error = None
        self.loading = False
        self.loaded = True
        return True

    # === query actions ===

    async def search(self, text: str) -> bool:
        self.query.set_search(text)
        return await self.reload()

    async def change_page_size(self, page_size: int) -> bool:
        self.query.set_page_size(page_size)
        return await self.reload()

    async def sort_by(self, column: str) -> bool:
        if not self.schema.column(column).sortable:
            raise ValueError(f"Column {column!r} cannot be sorted")
        self.query.toggle_sort(column)
        return await self.reload()

    async def next_page(self) -> bool:
        if not self.summary.has_next:
            return False
        self.query.go_to_page(self.query.page + 1)
        return await self.reload()

    async def previous_page(self) -> bool:
        if not self.summary.has_previous:
            return False
        self.query.go_to_page(self.query.page - 1)
        return await self.reload()

    async def go_to_page(self, page: int) -> bool:
        self.query.go_to_page(clamp_page(page, self.summary.total_pages))
        return await self.reload()

    async def set_filter(self, name: str, value: Any) -> bool:
        self.query.set_filter(name, value)
        return await self.reload()

    async def clear_filters(self) -> bool:
        self.query.clear_filters()
        return await self.reload()

    async def apply_preset(self, key: Optional[str]) -> bool:
        if key is None:
            return await self.clear_filters()
        self.query.apply_preset(self.schema.preset(key), today=self._today())
        return await self.reload()

    # === dialog actions ===

    def open_add(self) -> None:
        self.modal.open_add()

    async def open_edit(self, record_id: RecordId) -> bool:
        return await self.modal.open_edit(record_id)

    async def save(self, values) -> bool:
        return await self.modal.save(values)

    def request_delete(self, record_id: RecordId) -> None:
        self.modal.request_delete(record_id)

    async def confirm_delete(self) -> bool:
        return await self.modal.confirm_delete()

    def cancel(self) -> None:
        self.modal.cancel()


def build_view(
    kind: Union[RecordKind, str],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RecordView:
    """Wire schema, store and validator for one record kind."""
    schema = get_schema(kind)
    store = RecordStore(
        settings.api.base_url,
        schema.resource_path,
        timeout=settings.api.timeout,
        transport=transport,
    )
    return RecordView(schema, store, validator_for(schema.kind), page_size=settings.ui.page_size)
