"""Liveness endpoint for external uptime checks."""

from contextlib import contextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

HEALTH_TEXT = "Modmail Bot Active"

app = FastAPI(title="Modmail Bot", docs_url=None, redoc_url=None, openapi_url=None)


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Static liveness string"""
    return HEALTH_TEXT


class EmbeddedServer(uvicorn.Server):
    """uvicorn server sharing the bot's event loop.

    SIGINT/SIGTERM belong to the app's shutdown sequence, so uvicorn must not
    install its own handlers.
    """

    def install_signal_handlers(self) -> None:
        pass

    @contextmanager
    def capture_signals(self):
        yield


def build_server(port: int, host: str = "0.0.0.0") -> EmbeddedServer:
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    return EmbeddedServer(config)
