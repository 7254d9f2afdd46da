"""Health check result types shared by infrastructure components."""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Health check status."""

    OK = "ok"
    ERROR = "error"


class StorageHealthResult(BaseModel):
    """Health of the configured source store."""

    status: HealthStatus = Field(..., description="Health status")
    backend: str = Field(..., description="Storage backend name")
    error: str | None = Field(None, description="Error message")

    def to_dict(self) -> dict[str, str | None]:
        return self.model_dump(mode="json", exclude_none=False)
