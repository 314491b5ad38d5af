import json

import httpx
import pytest

from teadata.infrastructure.database.tea_service import SqliteTeaService

TEA_API_URL = "http://tea.test/"


@pytest.fixture(name="db_path")
def db_path_fixture(tmp_path) -> str:
    """Path of a fresh SQLite file; the file itself does not exist yet."""
    return str(tmp_path / "TeaVarieties.db")


@pytest.fixture(name="sqlite_service")
def sqlite_service_fixture(db_path: str) -> SqliteTeaService:
    """Initialized SQLite backend for blocking tests.

    Async tests initialize their own service with ``initialize_async``.
    """
    service = SqliteTeaService()
    service.initialize(db_path)
    return service


class FakeTeaApi:
    """In-memory stand-in for the tea REST API, used as an httpx handler.

    Serves ``api/teas`` and ``api/teas/{id}`` with bare tea bodies, or with
    ``{success, message, teas}`` envelopes when ``envelope`` is set. Every
    request is recorded in ``requests``.
    """

    def __init__(self, envelope: bool = False):
        self.envelope = envelope
        self.requests: list[httpx.Request] = []
        self.teas: dict[int, dict] = {
            1: {"id": 1, "name": "Earl Grey", "steepTime": "00:02:00", "brewTemp": 212}
        }
        self._next_id = 2

    def _reply(self, status: int, teas: list[dict], body=None, message: str = ""):
        if self.envelope:
            return httpx.Response(
                status,
                json={"success": status < 400, "message": message, "teas": teas},
            )
        if status >= 400:
            return httpx.Response(status, text=message)
        return httpx.Response(status, json=teas[0] if body is None else body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        if parts[:2] != ["api", "teas"]:
            return httpx.Response(404)

        tea_id = int(parts[2]) if len(parts) > 2 else None
        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and tea_id is None:
            teas = list(self.teas.values())
            return self._reply(200, teas, body=teas)

        if request.method == "POST":
            tea = {**body, "id": self._next_id}
            self._next_id += 1
            self.teas[tea["id"]] = tea
            return self._reply(201, [tea])

        target = tea_id if tea_id is not None else (body or {}).get("id")
        if target not in self.teas:
            return self._reply(404, [], message=f"Tea {target} not found")

        if request.method == "GET":
            return self._reply(200, [self.teas[target]])
        if request.method == "PUT":
            self.teas[target] = {**body, "id": target}
            return self._reply(200, [self.teas[target]])
        if request.method == "DELETE":
            deleted = self.teas.pop(target)
            return self._reply(200, [deleted], body=True)
        return httpx.Response(405)


@pytest.fixture(name="tea_api")
def tea_api_fixture() -> FakeTeaApi:
    return FakeTeaApi()


@pytest.fixture(name="envelope_api")
def envelope_api_fixture() -> FakeTeaApi:
    return FakeTeaApi(envelope=True)
