from pydantic import BaseModel
from typing import Optional


class OrderCreate(BaseModel):
    client_id: int
    product_id: int
    config: Optional[dict] = None
