"""Backend response models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .movie import Movie


class ListPageResult(BaseModel):
    """Outcome of a page listing request."""

    success: bool = Field(..., description="Whether the backend served the page")
    data: List[Movie] = Field(default_factory=list, description="Movies on the page")
    total_pages: Optional[int] = Field(None, description="Total pages reported by the backend")
    msg: Optional[str] = Field(None, description="Failure message")


class MutationResult(BaseModel):
    """Outcome of a create, update or delete request."""

    success: bool = Field(..., description="Whether the backend applied the change")
    msg: Optional[str] = Field(None, description="Backend message")
    data: Optional[Dict[str, Any]] = Field(None, description="Backend payload, if any")
