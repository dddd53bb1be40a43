"""
MongoDB connection handle using pymongo's asyncio client.

One `DatabaseConnection` exists per application. `main.lifespan` schedules
`connect()` as a background task and does not wait for it, so the HTTP
listener comes up whether or not MongoDB is reachable. The connect attempt
only produces log output; there is no retry.

Route handlers get the database through the `get_database` dependency, which
reads the handle off `app.state` instead of a module global.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .settings import Settings

logger = logging.getLogger(__name__)


class ConnectionState(str, enum.Enum):
    PENDING = "pending"
    OPEN = "open"
    ERRORED = "errored"


class DatabaseConnection:
    def __init__(
        self,
        uri: str,
        *,
        database_name: str,
        server_selection_timeout_ms: int = 30_000,
        client: Any = None,
    ) -> None:
        self.uri = uri
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.state = ConnectionState.PENDING
        self.error: Exception | None = None
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseConnection":
        return cls(
            settings.mongo_uri,
            database_name=settings.database_name,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
        )

    @property
    def client(self) -> Any:
        # The driver connects lazily, so building the client never blocks.
        if self._client is None:
            self._client = AsyncMongoClient(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
        return self._client

    def database(self) -> Any:
        return self.client[self.database_name]

    async def connect(self) -> ConnectionState:
        """
        Ping the server once and record the outcome.

        Failures are logged and kept on `self.error`; they never propagate.
        """
        if self.state is not ConnectionState.PENDING:
            return self.state

        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            self.state = ConnectionState.ERRORED
            self.error = exc
            logger.error("database_connection_failed database=%s error=%s", self.database_name, exc)
            return self.state

        self.state = ConnectionState.OPEN
        logger.info("database_connected database=%s", self.database_name)
        return self.state

    async def close(self) -> None:
        if self._client is None:
            return None
        await self._client.close()
        self._client = None


def get_connection(request: Request) -> DatabaseConnection:
    return request.app.state.db


def get_database(request: Request) -> Any:
    return get_connection(request).database()
