"""
Catalog schemas
===============

Typed shapes shared by the import pipeline, the store and the API.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class CanonicalRecipe(BaseModel):
    """A normalized recipe, ready to be written to the ``recipes`` table."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    cuisine: Optional[str] = None
    rating: Optional[float] = None
    prep_time: Optional[int] = Field(default=None, gt=0)
    cook_time: Optional[int] = Field(default=None, gt=0)
    total_time: Optional[int] = Field(default=None, gt=0)
    serves: Optional[str] = None
    nutrients: Optional[Dict[str, Any]] = None


class RecordError(BaseModel):
    """One record whose persistence failed after it passed normalization."""

    index: int
    recipe: str
    error: str


class ImportReport(BaseModel):
    inserted: int = 0
    skipped: int = 0
    errors: List[RecordError] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.inserted + self.skipped + len(self.errors)


class FilterExpr(BaseModel):
    operator: str
    value: Union[int, float]
