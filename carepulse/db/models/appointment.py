from typing import Optional
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
import uuid

from ...utils import utc_now

# All datetime columns hold aware UTC values; repositories normalize on the way in and out
class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    patient: str = Field(foreign_key="patients.id", index=True)
    user_id: str = Field(max_length=36, index=True)
    primary_physician: str
    schedule: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    status: str = Field(default="pending", index=True)
    reason: Optional[str] = Field(default=None, max_length=500)
    note: Optional[str] = Field(default=None, max_length=500)
    cancellation_reason: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    patient_record: Optional["Patient"] = Relationship(back_populates="appointments")
