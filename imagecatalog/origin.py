"""
Cross-origin gate.

Browsers send an ``Origin`` header on cross-origin calls. Requests
whose origin is not on the allow-list are refused with a bare 403
before any route runs; requests without the header (same-origin pages,
curl, server-to-server calls) always pass. The CORS response headers
for allowed callers are added by Starlette's ``CORSMiddleware``, which
``install_origin_policy`` wires in behind the gate.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]
REJECTION_TEXT = "Not allowed by CORS"


class OriginGate:
    """Allow-list check for the ``Origin`` request header."""

    def __init__(self, allowed_origins: Iterable[str]) -> None:
        self.allowed_origins = frozenset(allowed_origins)

    def allows(self, origin: Optional[str]) -> bool:
        # An empty header is treated like a missing one.
        if not origin:
            return True
        return origin in self.allowed_origins


class OriginGateMiddleware:
    """ASGI middleware answering 403 to requests from unknown origins."""

    def __init__(self, app: ASGIApp, gate: OriginGate) -> None:
        self.app = app
        self.gate = gate

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        if self.gate.allows(origin):
            await self.app(scope, receive, send)
            return

        logger.warning("Rejected %s %s from origin %s", scope.get("method"), scope.get("path"), origin)
        response = PlainTextResponse(REJECTION_TEXT, status_code=403)
        await response(scope, receive, send)


def install_origin_policy(app: FastAPI, allowed_origins: Iterable[str]) -> OriginGate:
    """Add the CORS headers middleware and, outside it, the origin gate."""
    gate = OriginGate(allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(gate.allowed_origins),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    # Added last so it wraps CORSMiddleware and sees the request first.
    app.add_middleware(OriginGateMiddleware, gate=gate)
    return gate
