# src/foosrank/schemas/common.py

"""Common Pydantic schemas used across multiple resources."""

from pydantic import BaseModel, ConfigDict, Field


class BeliefRead(BaseModel):
    """A skill belief as returned to clients.

    Attributes:
        mean: Point estimate of skill (default: 25.0)
        deviation: Uncertainty of the estimate (default: 8.333)
    """

    mean: float = Field(..., description="Estimated skill")
    deviation: float = Field(..., gt=0, description="Uncertainty of the estimate")

    model_config = ConfigDict(from_attributes=True)
