# core/store.py
"""
CRUD gateway to one json-server style REST collection.

Each call opens its own AsyncClient, so a store can be shared across event
loops (Streamlit runs every interaction in a fresh ``asyncio.run``). There is
no caching and no retrying: every list is a fresh round trip, and a failed
write is reported once to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from core.errors import NetworkError, NotFound, WriteError

log = logging.getLogger(__name__)

TOTAL_COUNT_HEADER = "X-Total-Count"
JSON_HEADERS = {"Accept": "application/json"}
_WRITE_VERBS = {"POST": "create", "PUT": "update", "DELETE": "delete"}

Record = Dict[str, Any]
RecordId = Union[int, str]
Params = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


@dataclass(frozen=True)
class ListResult:
    records: List[Record]
    total_count: int


def _total_from_headers(response: httpx.Response, fallback: int) -> int:
    raw = response.headers.get(TOTAL_COUNT_HEADER)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s header: %r", TOTAL_COUNT_HEADER, raw)
        return fallback


class RecordStore:
    def __init__(
        self,
        base_url: str,
        resource_path: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._resource_path = resource_path.strip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def resource_path(self) -> str:
        return self._resource_path

    @property
    def url(self) -> str:
        return f"{self._base_url}/{self._resource_path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers=JSON_HEADERS,
        )

    def _item_path(self, record_id: RecordId) -> str:
        return f"/{self._resource_path}/{record_id}"

    # === reads ===

    async def list(self, params: Optional[Params] = None) -> ListResult:
        """
        Fetch one page of the collection.

        The total number of matching records is read from X-Total-Count; when
        the server omits it the length of the returned page is used instead.

        Raises:
            NetworkError: transport failure, non-success status or a body
                that is not a JSON array.
        """
        path = f"/{self._resource_path}"
        log.debug("GET %s params=%s", path, params)
        try:
            async with self._client() as client:
                response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            log.warning("List %s failed: %s", path, e)
            raise NetworkError(f"Could not reach the server: {e}") from e

        if not response.is_success:
            log.warning("List %s returned HTTP %s", path, response.status_code)
            raise NetworkError(
                f"HTTP error! status: {response.status_code}", status_code=response.status_code
            )
        try:
            records = response.json()
        except ValueError as e:
            raise NetworkError(f"Server returned invalid JSON for {path}") from e
        if not isinstance(records, list):
            raise NetworkError(f"Expected a list of records from {path}, got {type(records).__name__}")

        return ListResult(records=records, total_count=_total_from_headers(response, len(records)))

    async def get(self, record_id: RecordId) -> Record:
        path = self._item_path(record_id)
        log.debug("GET %s", path)
        try:
            async with self._client() as client:
                response = await client.get(path)
        except httpx.HTTPError as e:
            log.warning("Get %s failed: %s", path, e)
            raise NetworkError(f"Could not reach the server: {e}") from e

        if response.status_code == 404:
            raise NotFound(f"Record {record_id} was not found", status_code=404)
        if not response.is_success:
            raise NetworkError(
                f"Failed to fetch record {record_id} (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        try:
            record = response.json()
        except ValueError as e:
            raise NetworkError(f"Server returned invalid JSON for {path}") from e
        if not isinstance(record, dict):
            raise NetworkError(f"Expected a record object from {path}")
        return record

    async def find_by(self, field: str, value: Any) -> List[Record]:
        """Exact-match lookup on one field, e.g. ``courses?code=CS101``."""
        result = await self.list([(field, value)])
        return result.records

    async def exists(self, field: str, value: Any) -> bool:
        return bool(await self.find_by(field, value))

    async def ping(self) -> bool:
        """True when the collection answers a one-row list request."""
        try:
            await self.list([("_limit", 1)])
        except NetworkError as e:
            log.error("Server at %s is not reachable: %s", self._base_url, e)
            return False
        return True

    # === writes ===

    async def _write(self, method: str, path: str, body: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        log.debug("%s %s", method, path)
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=body)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise WriteError(f"Could not reach the server: {e}") from e
        if not response.is_success:
            log.warning("%s %s returned HTTP %s", method, path, response.status_code)
            raise WriteError(
                f"Failed to {_WRITE_VERBS.get(method, 'save')} record (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _record_from(response: httpx.Response, fallback: Record) -> Record:
        try:
            body = response.json()
        except ValueError:
            return fallback
        return body if isinstance(body, dict) else fallback

    async def create(self, record: Mapping[str, Any]) -> Record:
        body = {k: v for k, v in record.items() if k != "id"}
        response = await self._write("POST", f"/{self._resource_path}", body)
        created = self._record_from(response, body)
        log.info("Created %s record id=%s", self._resource_path, created.get("id"))
        return created

    async def update(self, record_id: RecordId, record: Mapping[str, Any]) -> Record:
        body = {**record, "id": record_id}
        response = await self._write("PUT", self._item_path(record_id), body)
        log.info("Updated %s record id=%s", self._resource_path, record_id)
        return self._record_from(response, body)

    async def delete(self, record_id: RecordId) -> bool:
        await self._write("DELETE", self._item_path(record_id))
        log.info("Deleted %s record id=%s", self._resource_path, record_id)
        return True

