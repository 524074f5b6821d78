"""Label schemas."""

from pydantic import BaseModel, ConfigDict, Field


class LabelCreate(BaseModel):
    """Add a label to the vocabulary."""

    label_name: str = Field(..., min_length=1, max_length=100)


class LabelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label_id: str
    label_name: str


class LabelListResponse(BaseModel):
    labels: list[LabelResponse]
