"""JSON envelope shared by every API response.

Shape: {message, event?, events?, booking?, count?, error?}. The status code
carries the outcome.
"""

from typing import Any, Optional

from fastapi.responses import JSONResponse

from devevent.models import DocumentSchema


def envelope(
    status_code: int,
    message: str,
    *,
    error: Optional[str] = None,
    **payload: Any,
) -> JSONResponse:
    """Build an envelope response. Documents in payload are serialized."""
    body: dict[str, Any] = {"message": message}
    for key, value in payload.items():
        if isinstance(value, DocumentSchema):
            value = value.to_json()
        elif isinstance(value, list):
            value = [v.to_json() if isinstance(v, DocumentSchema) else v for v in value]
        body[key] = value
    if error is not None:
        body["error"] = error
    return JSONResponse(content=body, status_code=status_code)
