# tests/conftest.py

import asyncio
import json

import httpx
import pytest

from core.engine import build_view
from core.settings import ApiSettings, Settings, UiSettings
from core.store import RecordStore

BASE_URL = "http://testserver"

_RESERVED = {"_page", "_limit", "_sort", "_order", "q"}


def _as_number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare_key(value):
    number = _as_number(value)
    if number is not None:
        return (0, number, "")
    return (1, 0.0, str(value))


class FakeJsonServer:
    """
    In-memory stand-in for json-server, served through httpx.MockTransport.

    Supports _page/_limit, q, _sort/_order, FIELD=VALUE (repeatable),
    FIELD_gte / FIELD_lte and the X-Total-Count header.
    """

    def __init__(self, collections):
        self.data = {name: [dict(r) for r in rows] for name, rows in collections.items()}
        self.calls = []
        self.failures = {}
        self.delays = {}
        self.offline = False
        self.omit_total = False
        self._next_id = 1000

    # --- helpers for tests ---

    def count(self, method, path_prefix=""):
        return sum(1 for m, p, _ in self.calls if m == method and p.startswith(path_prefix))

    def list_calls(self, collection):
        return [params for m, p, params in self.calls if m == "GET" and p == f"/{collection}"]

    def transport(self):
        return httpx.MockTransport(self)

    # --- request handling ---

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        params = request.url.params
        self.calls.append((method, path, params))

        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        delay = self.delays.get(params.get("_page"))
        if delay:
            await asyncio.sleep(delay)

        status = self.failures.get(method)
        if status:
            return httpx.Response(status, json={"error": "injected"})

        parts = [p for p in path.split("/") if p]
        if not parts or parts[0] not in self.data:
            return httpx.Response(404, json={})
        rows = self.data[parts[0]]

        if len(parts) == 1:
            if method == "GET":
                return self._list(rows, params)
            if method == "POST":
                body = json.loads(request.content)
                self._next_id += 1
                body["id"] = str(self._next_id)
                rows.append(body)
                return httpx.Response(201, json=body)
            return httpx.Response(405, json={})

        record_id = parts[1]
        index = next((i for i, r in enumerate(rows) if str(r.get("id")) == record_id), None)
        if index is None:
            return httpx.Response(404, json={})
        if method == "GET":
            return httpx.Response(200, json=rows[index])
        if method == "PUT":
            body = json.loads(request.content)
            rows[index] = body
            return httpx.Response(200, json=body)
        if method == "DELETE":
            rows.pop(index)
            return httpx.Response(200, json={})
        return httpx.Response(405, json={})

    def _list(self, rows, params):
        items = list(rows)

        q = params.get("q")
        if q:
            needle = q.lower()
            items = [r for r in items if any(needle in str(v).lower() for v in r.values())]

        for key in set(params.keys()) - _RESERVED:
            values = params.get_list(key)
            if key.endswith("_gte"):
                name = key[:-4]
                items = [r for r in items if name in r and _compare_key(r[name]) >= _compare_key(values[0])]
            elif key.endswith("_lte"):
                name = key[:-4]
                items = [r for r in items if name in r and _compare_key(r[name]) <= _compare_key(values[0])]
            else:
                items = [r for r in items if str(r.get(key)) in values]

        sort = params.get("_sort")
        if sort:
            reverse = params.get("_order") == "desc"
            items.sort(key=lambda r: _compare_key(r.get(sort)), reverse=reverse)

        total = len(items)
        if "_page" in params or "_limit" in params:
            limit = int(params.get("_limit", 10))
            page = int(params.get("_page", 1))
            start = (page - 1) * limit
            items = items[start:start + limit]

        headers = {} if self.omit_total else {"X-Total-Count": str(total)}
        return httpx.Response(200, json=items, headers=headers)


def _students():
    departments = ["Computer Science", "Engineering", "Business", "Medicine", "Arts", "Science"]
    rows = []
    for i in range(1, 13):
        rows.append({
            "id": str(i),
            "name": f"Student {i:02d}",
            "email": f"student{i}@uni.edu",
            "phone": f"55500000{i:02d}",
            "department": departments[i % len(departments)],
            "gpa": round(2.0 + (i % 5) * 0.45, 2),
            "enrollmentDate": f"2023-0{1 + i % 9}-01",
        })
    return rows


def seed_data():
    return {
        "students": _students(),
        "courses": [
            {"id": "1", "code": "CS101", "name": "Intro to Programming", "credits": 3,
             "department": "Computer Science", "instructor": "Dr. Smith"},
            {"id": "2", "code": "ENG201", "name": "Technical Writing", "credits": 2,
             "department": "Engineering", "instructor": "Prof. Jones"},
        ],
        "instructors": [
            {"id": "1", "name": "Dr. Alan Grant", "email": "grant@uni.edu", "phone": "5551112222",
             "department": "Biology", "specialization": "Paleontology", "hireDate": "2010-09-01"},
            {"id": "2", "name": "Dr. Ellie Sattler", "email": "sattler@uni.edu", "phone": "5551113333",
             "department": "Biology", "specialization": "Paleobotany", "hireDate": "2019-02-15"},
        ],
        "employees": [
            {"id": "1", "name": "Maya Ortiz", "email": "maya@uni.edu", "phone": "5552220000",
             "position": "Academic Advisor", "department": "Academic Affairs", "hireDate": "2015-03-01"},
            {"id": "2", "name": "Tom Reyes", "email": "tom@uni.edu", "phone": "5552221111",
             "position": "HR Manager", "department": "Human Resources", "hireDate": "2021-07-19"},
            {"id": "3", "name": "Lena Park", "email": "lena@uni.edu", "phone": "5552222222",
             "position": "Admissions Officer", "department": "Admissions", "hireDate": "2012-11-05"},
        ],
    }


@pytest.fixture
def server():
    return FakeJsonServer(seed_data())


@pytest.fixture
def settings():
    return Settings(
        api=ApiSettings(base_url=BASE_URL, timeout=5.0),
        ui=UiSettings(page_size=5, page_size_options=(5, 10, 25)),
    )


@pytest.fixture
def make_store(server):
    def _make(resource_path="students"):
        return RecordStore(BASE_URL, resource_path, timeout=5.0, transport=server.transport())
    return _make


@pytest.fixture
def make_view(server, settings):
    def _make(kind="students"):
        return build_view(kind, settings, transport=server.transport())
    return _make


@pytest.fixture
def valid_student():
    return {
        "name": "Ann Lee",
        "email": "a@b.edu",
        "phone": "1234567890",
        "department": "Science",
        "gpa": "3.7",
        "enrollmentDate": "2023-01-01",
    }


@pytest.fixture
def valid_course():
    return {
        "code": "cs205",
        "name": "Data Structures",
        "credits": "4",
        "department": "Computer Science",
        "instructor": "Dr. Lee",
    }
