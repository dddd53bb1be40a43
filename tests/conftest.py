"""
Shared pytest fixtures for the product API.

MongoDB is replaced by a small in-memory fake of the async client so the
suite runs without a database server.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from core.db import DatabaseConnection
from core.settings import Settings
from main import create_app

# Test modules import the fakes below with `from conftest import ...`.
_tests_dir = Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))


class FakeCursor:
    def __init__(self, docs: list[dict]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    def skip(self, n: int) -> "FakeCursor":
        self._docs = self._docs[n:]
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length: int | None = None) -> list[dict]:
        docs = self._docs if length is None else self._docs[:length]
        return [dict(d) for d in docs]


class FakeCollection:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, dict] = {}

    def find(self, filter: dict | None = None) -> FakeCursor:
        return FakeCursor([d for d in self.docs.values() if _matches(d, filter or {})])

    async def find_one(self, filter: dict) -> dict | None:
        for doc in self.docs.values():
            if _matches(doc, filter):
                return dict(doc)
        return None

    async def insert_one(self, doc: dict) -> Any:
        oid = doc.get("_id") or ObjectId()
        self.docs[oid] = {**doc, "_id": oid}
        return SimpleNamespace(inserted_id=oid)

    async def find_one_and_update(self, filter: dict, update: dict, return_document: Any = None) -> dict | None:
        for oid, doc in self.docs.items():
            if _matches(doc, filter):
                doc.update(update.get("$set", {}))
                return dict(self.docs[oid])
        return None

    async def delete_one(self, filter: dict) -> Any:
        for oid, doc in list(self.docs.items()):
            if _matches(doc, filter):
                del self.docs[oid]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


def _matches(doc: dict, filter: dict) -> bool:
    return all(doc.get(k) == v for k, v in filter.items())


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeAdmin:
    def __init__(self, mode: str) -> None:
        self.mode = mode
        self.pings = 0

    async def command(self, name: str) -> dict:
        self.pings += 1
        if self.mode == "unreachable":
            raise ServerSelectionTimeoutError("nohost:27017: [Errno -2] Name or service not known")
        if self.mode == "hang":
            await asyncio.sleep(3600)
        return {"ok": 1.0}


class FakeMongoClient:
    """
    mode: "ok" answers pings, "unreachable" fails them, "hang" never answers.
    """

    def __init__(self, mode: str = "ok") -> None:
        self.admin = FakeAdmin(mode)
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase())

    async def close(self) -> None:
        self.closed = True


class BrokenCollection:
    """
    Collection whose every call fails like a driver with no reachable server.
    """

    def __getattr__(self, name: str) -> Any:
        def fail(*args: Any, **kwargs: Any) -> Any:
            raise ServerSelectionTimeoutError("nohost:27017: timed out")

        return fail


class BrokenDatabase:
    def __getitem__(self, name: str) -> BrokenCollection:
        return BrokenCollection()


class BrokenMongoClient(FakeMongoClient):
    def __init__(self) -> None:
        super().__init__(mode="unreachable")

    def __getitem__(self, name: str) -> BrokenDatabase:
        return BrokenDatabase()


def pytest_configure(config: pytest.Config) -> None:
    """Register project markers before collection."""
    markers = {
        "unit": "Unit tests that should execute quickly.",
        "integration": "Tests that bind real sockets.",
    }
    for name, description in markers.items():
        config.addinivalue_line("markers", f"{name}: {description}")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_client() -> FakeMongoClient:
    return FakeMongoClient()


def make_connection(client: Any, settings: Settings | None = None) -> DatabaseConnection:
    settings = settings or Settings()
    return DatabaseConnection(
        settings.mongo_uri,
        database_name=settings.database_name,
        client=client,
    )


@pytest.fixture
def connection(fake_client: FakeMongoClient, settings: Settings) -> DatabaseConnection:
    return make_connection(fake_client, settings)


@pytest.fixture
def client(settings: Settings, connection: DatabaseConnection):
    with TestClient(create_app(settings, connection)) as test_client:
        yield test_client
