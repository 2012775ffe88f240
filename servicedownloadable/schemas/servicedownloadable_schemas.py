from pydantic import BaseModel
from typing import Optional, Union


class ConfigSaveSchema(BaseModel):
    id: Optional[int] = None
    update_orders: Optional[bool] = None


class ProductFileSchema(BaseModel):
    id: Optional[int] = None


class ClientSendFileSchema(BaseModel):
    # kept loose: "" must reach the required check, not a 422
    order_id: Optional[Union[int, str]] = None
