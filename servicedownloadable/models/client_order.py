from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class ClientOrder(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id", index=True)

    product_type: str
    title: str

    status: str = Field(default="pending")  # pending | active | suspended | cancelled

    # copy of the product config taken when the order was placed
    config: Optional[str] = None

    # bound service record, set on activation
    service_id: Optional[int] = None
    service_type: Optional[str] = None

    activated_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
