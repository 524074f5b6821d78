"""Label API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskboard.api.dependencies import CurrentIdentity
from taskboard.database import get_db
from taskboard.errors import InvalidInput
from taskboard.models.label import Label
from taskboard.models.mixins import new_id
from taskboard.schemas.label import LabelCreate, LabelListResponse, LabelResponse

router = APIRouter(prefix="/api/labels", tags=["labels"])


@router.get("", response_model=LabelListResponse)
def get_labels(db: Annotated[Session, Depends(get_db)]):
    """Get the label vocabulary. No authentication required."""
    labels = db.query(Label).order_by(Label.label_name).all()
    return LabelListResponse(labels=[LabelResponse.model_validate(label) for label in labels])


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
def create_label(
    label_data: LabelCreate,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
):
    """Add a label to the shared vocabulary."""
    name = label_data.label_name.strip()
    if not name:
        raise InvalidInput("Label name is required")
    if db.query(Label).filter(Label.label_name == name).first():
        raise InvalidInput(f"Label '{name}' already exists")

    label = Label(label_id=new_id(), label_name=name)
    db.add(label)
    db.commit()
    db.refresh(label)
    return label
