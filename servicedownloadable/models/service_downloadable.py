from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class ServiceDownloadable(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="user.id")
    order_id: Optional[int] = Field(default=None, index=True)

    filename: str
    downloads: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
