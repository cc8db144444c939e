from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope every endpoint answers with."""

    success: bool
    message: str
    data: Optional[T] = None
    error: Optional[Any] = None


def api_response(success: bool, message: str, data: Any = None, error: Any = None) -> dict:
    """Build an envelope, carrying ``data`` on success and ``error`` on failure."""
    body = {"success": success, "message": message}
    if success:
        body["data"] = data
    else:
        body["error"] = error
    return body
