from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        # Floats must be finite
        allow_inf_nan=False
    )


class APIResponse(BaseModel, Generic[T]):
    """Uniform response envelope"""
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[T] = None

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        # message and count only appear when set
        payload = handler(self)
        for key in ("message", "count"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload
