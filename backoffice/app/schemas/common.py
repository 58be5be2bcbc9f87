"""
Common response envelope.
"""

from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint: {message, status, data}."""
    message: str
    status: bool = True
    data: Optional[T] = None
