"""Standard API response models."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response model."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int = 200
    message: str = "Operation successful"
    data: T | None = None
    meta: dict | None = None

    @classmethod
    def success(
        cls,
        data: T = None,
        message: str = "Operation successful",
        code: int = 200,
        meta: dict | None = None,
    ) -> "ApiResponse[T]":
        return cls(code=code, message=message, data=data, meta=meta)
