# core/modal.py
"""
Add / edit / delete dialog state machine for one record view.

    Closed --open_add--------> AddOpen
    Closed --open_edit(id)---> EditOpen(record fetched by id) | Closed + error
    AddOpen|EditOpen --save--> Closed (+ reload) | unchanged + errors
    AddOpen|EditOpen --cancel-> Closed
    Closed --request_delete--> DeleteConfirm(id)
    DeleteConfirm --confirm--> Closed (+ reload on success, error on failure)
    DeleteConfirm --cancel---> Closed

Field violations are resolved here and never reach the store. Store
failures are reported through ``error`` and never retried.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from core.errors import ModalStateError, ReadError, ValidationError, WriteError
from core.store import Record, RecordId, RecordStore
from core.validation import ValidationResult, Validator
from schemas.entity import EntitySchema

log = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────
# States
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Closed:
    name = "closed"


@dataclass(frozen=True)
class AddOpen:
    name = "add"


@dataclass(frozen=True)
class EditOpen:
    record: Record = field(default_factory=dict)
    name = "edit"

    @property
    def record_id(self) -> RecordId:
        return self.record["id"]


@dataclass(frozen=True)
class DeleteConfirm:
    record_id: RecordId = None
    name = "delete"


ModalState = Union[Closed, AddOpen, EditOpen, DeleteConfirm]

CLOSED = Closed()


class ModalWorkflow:
    def __init__(
        self,
        schema: EntitySchema,
        store: RecordStore,
        validator: Validator,
        on_change: Optional[Callable[[], Awaitable[Any]]] = None,
        today: Callable[[], datetime.date] = datetime.date.today,
    ):
        self._schema = schema
        self._store = store
        self._validator = validator
        self._on_change = on_change
        self._today = today
        self._busy = False

        self.state: ModalState = CLOSED
        self.form_values: Dict[str, Any] = {}
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.error: Optional[str] = None

    # === properties ===

    @property
    def is_closed(self) -> bool:
        return isinstance(self.state, Closed)

    @property
    def is_form_open(self) -> bool:
        return isinstance(self.state, (AddOpen, EditOpen))

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def title(self) -> str:
        label = self._schema.entity_label
        if isinstance(self.state, AddOpen):
            return f"Add New {label}"
        if isinstance(self.state, EditOpen):
            return f"Edit {label}"
        if isinstance(self.state, DeleteConfirm):
            return f"Delete {label}"
        return ""

    # === helpers ===

    def _require(self, *allowed: type, action: str) -> None:
        if self._busy:
            raise ModalStateError(f"Cannot {action}: a request is still in progress.")
        if not isinstance(self.state, allowed):
            raise ModalStateError(f"Cannot {action} while the dialog is {self.state.name}.")

    def _close(self) -> None:
        self.state = CLOSED
        self.form_values = {}
        self.errors = []
        self.warnings = []

    async def _notify_change(self) -> None:
        if self._on_change is not None:
            await self._on_change()

    # === transitions ===

    def open_add(self) -> None:
        self._require(Closed, action="add a record")
        self._close()
        self.error = None
        self.form_values = self._schema.blank_form()
        self.state = AddOpen()

    async def open_edit(self, record_id: RecordId) -> bool:
        """Fetch the freshest server copy and open the form on it."""
        self._require(Closed, action="edit a record")
        self.error = None
        self._busy = True
        try:
            record = await self._store.get(record_id)
        except ReadError as e:
            log.warning("Could not load %s %s for editing: %s", self._schema.entity_label, record_id, e)
            self.error = f"Failed to load record for editing: {e}"
            return False
        finally:
            self._busy = False

        self.errors = []
        self.warnings = []
        self.form_values = self._schema.form_from_record(record)
        self.state = EditOpen(record=record)
        return True

    async def _check(self, values: Mapping[str, Any], creating: bool) -> ValidationResult:
        result = self._validator(values, today=self._today())
        self.warnings = list(result.warnings)
        result.raise_for_errors()
        if creating:
            duplicates = []
            for name in self._schema.unique_fields:
                value = result.values.get(name)
                if value is not None and await self._store.exists(name, value):
                    label = self._schema.field(name).label
                    duplicates.append(f"{label} {value} already exists!")
            if duplicates:
                raise ValidationError(duplicates)
        return result

    async def save(self, values: Mapping[str, Any]) -> bool:
        """
        Validate and write the form.

        Returns True when the record was written and the dialog closed. On
        any failure the dialog stays open with the entered values kept.
        """
        self._require(AddOpen, EditOpen, action="save")
        creating = isinstance(self.state, AddOpen)
        self.form_values = dict(values)
        self.errors = []
        self.error = None

        self._busy = True
        try:
            try:
                result = await self._check(values, creating)
            except ValidationError as e:
                self.errors = e.errors
                log.debug("Validation failed for %s: %s", self._schema.entity_label, e.errors)
                return False
            except ReadError as e:
                self.error = f"Could not verify uniqueness: {e}"
                return False

            try:
                if creating:
                    await self._store.create(result.values)
                else:
                    await self._store.update(self.state.record_id, result.values)
            except WriteError as e:
                self.error = f"Failed to save {self._schema.entity_label.lower()}. Please try again. ({e})"
                return False
        finally:
            self._busy = False

        self._close()
        await self._notify_change()
        return True

    def cancel(self) -> None:
        """Close whatever is open and discard unsaved input."""
        if self._busy:
            raise ModalStateError("Cannot close the dialog while a request is in progress.")
        self._close()

    def request_delete(self, record_id: RecordId) -> None:
        self._require(Closed, action="delete a record")
        self.error = None
        self.state = DeleteConfirm(record_id=record_id)

    async def confirm_delete(self) -> bool:
        self._require(DeleteConfirm, action="confirm delete")
        record_id = self.state.record_id
        self.error = None

        self._busy = True
        try:
            await self._store.delete(record_id)
        except WriteError as e:
            self.error = f"Failed to delete record. Please try again. ({e})"
            return False
        finally:
            self._busy = False
            self._close()

        await self._notify_change()
        return True
