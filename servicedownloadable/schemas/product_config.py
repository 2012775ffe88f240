import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ProductConfig(BaseModel):
    """
    Config blob of a product (and the copy kept on each order).

    Only ``filename`` and ``update_orders`` are interpreted; any other key
    is kept as-is so that saving one option never drops another.
    """

    model_config = ConfigDict(extra="allow")

    filename: Optional[str] = None
    update_orders: bool = False

    @field_validator("filename", mode="before")
    @classmethod
    def _filename_as_text(cls, value: Any):
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("update_orders", mode="before")
    @classmethod
    def _lenient_bool(cls, value: Any):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "ProductConfig":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)

    def merge(self, data: dict) -> "ProductConfig":
        return ProductConfig.model_validate({**self.to_dict(), **data})

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
