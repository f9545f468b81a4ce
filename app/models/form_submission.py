# app/models/form_submission.py
import uuid
from sqlalchemy import Column, ForeignKey, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    form_id = Column(
        UUID(as_uuid=True),
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False
    )

    # Answers keyed by field name, validated against the form schema
    content = Column(JSONB, nullable=False)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    form = relationship("Form", back_populates="submissions")

    # Indexes
    __table_args__ = (
        Index('idx_submission_form_submitted', 'form_id', 'submitted_at'),
    )
