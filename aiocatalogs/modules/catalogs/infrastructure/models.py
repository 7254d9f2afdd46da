"""Catalog database models."""

from sqlalchemy import JSON
from sqlmodel import Field

from aiocatalogs.core.infrastructure.database.base_model import TimestampedModel


class UserConfigModel(TimestampedModel, table=True):
    """One row per user holding the ordered source list as a JSON document."""

    __tablename__ = "user_configs"

    user_id: str = Field(primary_key=True)
    config: dict = Field(default_factory=dict, sa_type=JSON, nullable=False)
