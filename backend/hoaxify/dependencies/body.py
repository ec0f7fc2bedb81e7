# hoaxify/dependencies/body.py
from __future__ import annotations

import json
from typing import Any

from fastapi import Request


async def json_body(request: Request) -> dict[str, Any]:
    """
    Reads the request body as a JSON object without failing the request.

    A missing, non-JSON or non-object body yields ``{}``, so the route can
    run its authorization check first and then report bad fields itself.
    """
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
