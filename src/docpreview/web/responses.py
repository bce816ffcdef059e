"""Response helpers shared by the local and hosted routers."""

from __future__ import annotations

import json
from typing import Any


def json_response(payload: Any, status: int = 200) -> Any:
    """A Chirp ``Response`` with a JSON body."""
    from chirp.http.response import Response

    return Response(
        body=json.dumps(payload),
        status=status,
        content_type="application/json",
    )


def text_response(text: str, status: int = 200, content_type: str = "text/plain; charset=utf-8") -> Any:
    from chirp.http.response import Response

    return Response(body=text, status=status, content_type=content_type)


def error_response(message: str, status: int = 500) -> Any:
    """``{"error": message}`` with *status*."""
    return json_response({"error": message}, status=status)


def not_found(what: str) -> Any:
    return error_response(f"{what} not found", status=404)
