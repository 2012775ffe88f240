from pydantic import BaseModel, Field
from typing import Optional


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    type: str = "downloadable"
    config: Optional[dict] = None


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = None
    type: Optional[str] = None
    # merged into the existing config blob
    config: Optional[dict] = None
