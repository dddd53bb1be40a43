"""
HTTP listener built on uvicorn.
"""

from __future__ import annotations

import logging
import socket

import uvicorn

logger = logging.getLogger(__name__)


class ApiServer(uvicorn.Server):
    """
    uvicorn server that reports the bound port once the socket is listening.
    """

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.should_exit:
            return
        logger.info("server_listening host=%s port=%s", self.config.host, self.bound_port())

    def bound_port(self) -> int:
        # PORT=0 lets the OS choose; report what the socket actually got.
        for server in self.servers:
            for sock in server.sockets:
                name = sock.getsockname()
                if isinstance(name, tuple):
                    return name[1]
        return self.config.port


def build_server(app, *, host: str, port: int) -> ApiServer:
    # log_config=None keeps uvicorn's loggers on the root handler from core.log.
    config = uvicorn.Config(app, host=host, port=port, log_config=None, lifespan="on")
    return ApiServer(config)
