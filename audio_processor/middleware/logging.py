"""Request logging middleware: one colored console line per request."""

from __future__ import annotations

import json
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("audio_processor.middleware.structured")

_ANSI_RESET = "\u001b[0m"
_STATUS_COLORS = (
    (500, "\u001b[31m"),  # red
    (400, "\u001b[33m"),  # yellow
    (200, "\u001b[32m"),  # green
)
_DEFAULT_COLOR = "\u001b[36m"

_SESSION_PATH = re.compile(r"/sessions/([0-9a-fA-F-]{36})")


def _color_for(status_code: int) -> str:
    for floor, color in _STATUS_COLORS:
        if status_code >= floor:
            return color
    return _DEFAULT_COLOR


def _session_from_path(path: str) -> Optional[str]:
    match = _SESSION_PATH.search(path)
    return match.group(1) if match else None


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, latency and session id for every request.

    The console line is meant for humans; the same record is emitted as
    compact JSON at DEBUG level for log shippers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        record: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "session_id": _session_from_path(request.url.path),
        }

        try:
            response = await call_next(request)
        except Exception as exc:
            record.update(status_code=500, error=repr(exc))
            record["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.exception(self._console_line(record))
            raise

        record["status_code"] = response.status_code
        record["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        logger.info(self._console_line(record))
        logger.debug(json.dumps(record, default=str, separators=(",", ":")))
        return response

    @staticmethod
    def _console_line(record: dict[str, Any]) -> str:
        status_code = record.get("status_code") or 0
        line = (
            f"{record['method']} {record['path']} -> {status_code} "
            f"({record.get('duration_ms', '-')} ms) "
            f"client={record.get('client_ip') or '-'} "
            f"session={record.get('session_id') or '-'}"
        )
        return f"{_color_for(status_code)}{line}{_ANSI_RESET}"
