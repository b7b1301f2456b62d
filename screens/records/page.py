# screens/records/page.py
# -------------------------------------------------------------------
# Generic record management page.
# - One RecordView per selected record kind, kept in session_state and
#   replaced when the user navigates to another kind.
# - Table, search, sort, filters and pagination are driven from the
#   schema; nothing here branches on the record kind.
# -------------------------------------------------------------------
from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import streamlit as st

from core.engine import RecordView, build_view
from core.modal import DeleteConfirm
from core.settings import Settings
from core.table import EMPTY_TABLE_MESSAGE, header_label, record_caption, rows_to_frame
from schemas.entity import EntitySchema, RecordKind
from schemas.fields import DateField, FieldSpec, SelectField
from schemas.registry import get_schema

log = logging.getLogger(__name__)

ALL_OPTION = "(all)"
DATE_MIN = datetime.date(1900, 1, 1)
DATE_MAX = datetime.date(2100, 12, 31)


# ────────────────────────────────────────────────────────────────────────────────
# Small helpers
# ────────────────────────────────────────────────────────────────────────────────

def _k(kind: RecordKind, s: str) -> str:
    """Per-kind key namespace so widgets of different pages never collide."""
    return f"records__{kind.value}__{s}"


def _run(coro: Awaitable[Any]) -> Any:
    return asyncio.run(coro)


def _act(action: Callable[..., Awaitable[Any]], *args) -> None:
    """Widget callback: run one async view action to completion."""
    try:
        _run(action(*args))
    except Exception as e:
        log.error("Action %s failed", getattr(action, "__name__", action), exc_info=True)
        st.session_state["records__flash"] = str(e)


def _get_view(kind: RecordKind, settings: Settings) -> RecordView:
    """Create the view on navigation; discard the previous kind's view."""
    current: Optional[RecordView] = st.session_state.get("records__view")
    if current is None or current.schema.kind != kind:
        log.info("Opening %s view", kind.value)
        current = build_view(kind, settings)
        st.session_state["records__view"] = current
        _sync_filter_widgets(current)
    return current


# ────────────────────────────────────────────────────────────────────────────────
# Toolbar: search, page size, presets, filters
# ────────────────────────────────────────────────────────────────────────────────

def _on_search(view: RecordView, key: str) -> None:
    _act(view.search, st.session_state.get(key, ""))


def _on_page_size(view: RecordView, key: str) -> None:
    _act(view.change_page_size, st.session_state[key])


def _sync_filter_widgets(view: RecordView) -> None:
    """
    Push the query's preset and filters back into the toolbar widgets.

    Keyed widgets keep their own session_state value, so after a preset
    replaces the filters (or a filter replaces the preset) the other
    boxes must be reset here to show what is actually applied.
    """
    kind = view.schema.kind
    query = view.query
    if view.schema.presets:
        st.session_state[_k(kind, "preset")] = query.preset
    for f in view.schema.select_fields:
        value = query.filters.get(f.name)
        st.session_state[_k(kind, f"filter_{f.name}")] = value if value in f.options else ALL_OPTION


def _on_preset(view: RecordView, key: str) -> None:
    _act(view.apply_preset, st.session_state[key])
    _sync_filter_widgets(view)


def _on_filter(view: RecordView, field_name: str, key: str) -> None:
    value = st.session_state[key]
    _act(view.set_filter, field_name, None if value == ALL_OPTION else value)
    _sync_filter_widgets(view)


def _render_toolbar(view: RecordView, settings: Settings) -> None:
    schema = view.schema
    kind = schema.kind
    query = view.query

    col_search, col_size = st.columns([4, 1])
    with col_search:
        key = _k(kind, "search")
        st.text_input(
            "Search",
            value=query.search_text,
            placeholder=f"Search {schema.resource_path}...",
            key=key,
            on_change=_on_search,
            args=(view, key),
        )
    with col_size:
        key = _k(kind, "page_size")
        options = list(settings.ui.page_size_options)
        st.selectbox(
            "Rows per page",
            options,
            index=options.index(query.page_size) if query.page_size in options else 0,
            key=key,
            on_change=_on_page_size,
            args=(view, key),
        )

    filter_fields = list(schema.select_fields)
    if not schema.presets and not filter_fields:
        return

    widget_keys = [_k(kind, f"filter_{f.name}") for f in filter_fields]
    if schema.presets:
        widget_keys.append(_k(kind, "preset"))
    if any(k not in st.session_state for k in widget_keys):
        _sync_filter_widgets(view)

    cols = st.columns(len(filter_fields) + (1 if schema.presets else 0))
    idx = 0
    if schema.presets:
        with cols[idx]:
            key = _k(kind, "preset")
            labels: Dict[Optional[str], str] = {None: "All records"}
            labels.update({p.key: p.label for p in schema.presets})
            keys = list(labels)
            st.selectbox(
                "Quick filter",
                keys,
                format_func=lambda k: labels[k],
                key=key,
                on_change=_on_preset,
                args=(view, key),
            )
        idx += 1
    for f in filter_fields:
        with cols[idx]:
            key = _k(kind, f"filter_{f.name}")
            options = [ALL_OPTION, *f.options]
            st.selectbox(
                f.label,
                options,
                key=key,
                on_change=_on_filter,
                args=(view, f.name, key),
            )
        idx += 1


# ────────────────────────────────────────────────────────────────────────────────
# Dialogs
# ────────────────────────────────────────────────────────────────────────────────

def _field_widget(f: FieldSpec, value: str, key: str) -> Any:
    label = f"{f.label}*" if f.required else f.label
    if isinstance(f, SelectField):
        options = ["", *f.options]
        return st.selectbox(
            label,
            options,
            index=options.index(value) if value in options else 0,
            format_func=lambda o: o or f"Select {f.label}",
            key=key,
        )
    if isinstance(f, DateField):
        try:
            initial = DateField.parse_date(value) if value else None
        except ValueError:
            initial = None
        picked = st.date_input(label, value=initial, min_value=DATE_MIN, max_value=DATE_MAX, key=key)
        return picked.isoformat() if picked else ""
    return st.text_input(label, value=value, key=key)


def _render_form(view: RecordView) -> None:
    schema = view.schema
    modal = view.modal
    state_key = modal.state.name
    if state_key == "edit":
        state_key = f"edit_{modal.state.record_id}"

    st.subheader(modal.title)
    with st.form(key=_k(schema.kind, f"form_{state_key}")):
        values: Dict[str, Any] = {}
        for f in schema.fields:
            values[f.name] = _field_widget(
                f,
                modal.form_values.get(f.name, ""),
                _k(schema.kind, f"{state_key}_{f.name}"),
            )
        col_save, col_cancel = st.columns(2)
        submitted = col_save.form_submit_button("Save", type="primary")
        cancelled = col_cancel.form_submit_button("Cancel")

    if modal.errors:
        st.error("Validation errors:\n" + "\n".join(f"- {e}" for e in modal.errors))
    for w in modal.warnings:
        st.warning(w)
    if modal.error:
        st.error(modal.error)

    if cancelled:
        view.cancel()
        st.rerun()
    if submitted:
        with st.spinner("Saving..."):
            saved = _run(view.save(values))
        if saved:
            st.session_state["records__notice"] = f"{schema.entity_label} saved."
        st.rerun()


def _render_delete_confirm(view: RecordView) -> None:
    kind = view.schema.kind
    record_id = view.modal.state.record_id
    st.subheader(view.modal.title)
    st.warning(f"Are you sure you want to delete record **{record_id}**? This cannot be undone.")
    col_yes, col_no = st.columns(2)
    col_yes.button("Delete", type="primary", key=_k(kind, "delete_confirm"),
                   on_click=_act, args=(view.confirm_delete,))
    col_no.button("Cancel", key=_k(kind, "delete_cancel"), on_click=view.cancel)


# ────────────────────────────────────────────────────────────────────────────────
# Table + pagination
# ────────────────────────────────────────────────────────────────────────────────

def _render_table(view: RecordView) -> None:
    schema = view.schema
    kind = schema.kind
    query = view.query

    if view.error:
        st.error(view.error)
        st.info("💡 Start it with: `json-server --watch data/db.json --port 3000`")
        return

    header_cols = st.columns(len(schema.columns))
    for col, column in zip(header_cols, schema.columns):
        col.button(
            header_label(column, query.sort_column, query.sort_order),
            key=_k(kind, f"sort_{column.key}"),
            disabled=not column.sortable,
            on_click=_act,
            args=(view.sort_by, column.key),
            use_container_width=True,
        )

    if not view.rows:
        st.info(EMPTY_TABLE_MESSAGE)
        return

    st.dataframe(rows_to_frame(view.rows, schema.columns), use_container_width=True, hide_index=True)

    by_id = {r.get("id"): r for r in view.rows}
    col_pick, col_edit, col_del = st.columns([3, 1, 1])
    with col_pick:
        picked = st.selectbox(
            "Record",
            list(by_id),
            format_func=lambda rid: record_caption(by_id[rid], schema.columns),
            key=_k(kind, "picker"),
        )
    closed = view.modal.is_closed
    col_edit.button("✏️ Edit", key=_k(kind, "edit_btn"), disabled=not closed or picked is None,
                    on_click=_act, args=(view.open_edit, picked))
    col_del.button("🗑️ Delete", key=_k(kind, "delete_btn"), disabled=not closed or picked is None,
                   on_click=view.request_delete, args=(picked,))


def _render_pagination(view: RecordView) -> None:
    kind = view.schema.kind
    summary = view.summary
    col_prev, col_info, col_next = st.columns([1, 3, 1])
    col_prev.button("← Previous", key=_k(kind, "prev"), disabled=not summary.has_previous,
                    on_click=_act, args=(view.previous_page,))
    col_info.caption(
        f"{summary.label} · showing {summary.first_item}-{summary.last_item} of {summary.total_items}"
    )
    col_next.button("Next →", key=_k(kind, "next"), disabled=not summary.has_next,
                    on_click=_act, args=(view.next_page,))


# ────────────────────────────────────────────────────────────────────────────────
# Page entry
# ────────────────────────────────────────────────────────────────────────────────

def render(kind: Union[RecordKind, str], settings: Settings) -> None:
    kind = RecordKind(kind)
    schema: EntitySchema = get_schema(kind)
    try:
        st.title(f"{schema.icon} {schema.title}")
        st.caption(schema.subtitle)

        view = _get_view(kind, settings)
        if not view.loaded and view.error is None:
            with st.spinner("Loading..."):
                _run(view.reload())

        flash = st.session_state.pop("records__flash", None)
        if flash:
            st.error(flash)
        notice = st.session_state.pop("records__notice", None)
        if notice:
            st.success(notice)

        _render_toolbar(view, settings)

        st.button(f"➕ Add New {schema.entity_label}", type="primary", key=_k(kind, "add_btn"),
                  disabled=not view.modal.is_closed, on_click=view.open_add)

        if view.modal.is_form_open:
            _render_form(view)
        elif isinstance(view.modal.state, DeleteConfirm):
            _render_delete_confirm(view)
        elif view.modal.error:
            st.error(view.modal.error)

        _render_table(view)
        _render_pagination(view)

    except Exception as e:
        st.error(f"An unexpected error occurred while rendering the {schema.title} page.")
        st.exception(e)
