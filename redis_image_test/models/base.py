"""Base model shared by configuration and plan models."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model rejecting unknown fields, so plan file typos fail loudly."""

    model_config = ConfigDict(frozen=True, extra="forbid")
