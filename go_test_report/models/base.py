"""Base model configuration for parsed report values."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable base for every value handed back to callers."""

    model_config = ConfigDict(frozen=True, extra="forbid")
