"""
Uniform response envelopes.

Every response body, success or failure, has the shape::

    {"success": true, "data": ..., "meta": {"timestamp": ...}}
    {"success": false, "error": {"message", "code", "details"?}, "meta": {...}}
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def format_iso(value: datetime) -> str:
    """Format datetime values as ISO-8601 strings with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _meta() -> Dict[str, str]:
    return {"timestamp": format_iso(datetime.now(timezone.utc))}


def success(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data), "meta": _meta()},
    )


def created(data: Any) -> JSONResponse:
    return success(data, status_code=201)


def error(
    message: str,
    status_code: int,
    code: str,
    details: Optional[Any] = None,
    stack: Optional[List[str]] = None,
) -> JSONResponse:
    block: Dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        block["details"] = jsonable_encoder(details)
    if stack:
        block["stack"] = stack
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": block, "meta": _meta()},
    )


def validation_details(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ordered ``{path, message}`` pairs, one per field."""
    details: List[Dict[str, str]] = []
    seen = set()
    for err in errors:
        path = ".".join(str(part) for part in err.get("loc", ()))
        if path in seen:
            continue
        seen.add(path)
        ctx = err.get("ctx") or {}
        if err.get("type") == "value_error" and "error" in ctx:
            message = str(ctx["error"])
        else:
            message = err.get("msg", "Invalid value")
        details.append({"path": path, "message": message})
    return details
