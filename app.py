# app.py
# Streamlit entry point: `streamlit run app.py`
from __future__ import annotations

import asyncio
import logging

import streamlit as st

from core.settings import load_settings
from core.store import RecordStore
from schemas.registry import all_schemas
from screens.records.page import render as render_records

log = logging.getLogger(__name__)


@st.cache_data(ttl=15, show_spinner=False)
def _server_online(base_url: str, resource_path: str, timeout: float | None) -> bool:
    """Probe the REST server once per TTL instead of on every rerun."""
    store = RecordStore(base_url, resource_path, timeout=timeout)
    return asyncio.run(store.ping())


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    st.set_page_config(page_title="Students Affairs System", page_icon="🎓", layout="wide")

    schemas = all_schemas()
    by_path = {s.resource_path: s for s in schemas}

    with st.sidebar:
        st.markdown("## 🎓 Students Affairs")
        selected = st.radio(
            "Navigate",
            list(by_path),
            format_func=lambda p: f"{by_path[p].icon} {by_path[p].kind.name.title()}s",
            key="nav_page",
        )
        st.caption(f"API: `{settings.api.base_url}`")

    schema = by_path[selected]
    if not _server_online(settings.api.base_url, schema.resource_path, settings.api.timeout):
        st.error("❌ Cannot connect to the server. Please make sure json-server is running.")
        st.info("💡 Run: `json-server --watch data/db.json --port 3000`")
        if st.button("Retry connection"):
            _server_online.clear()
            st.rerun()
        return

    render_records(schema.kind, settings)


if __name__ == "__main__":
    main()
