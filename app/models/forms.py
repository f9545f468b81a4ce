# app/models/forms.py
import uuid
from sqlalchemy import Column, String, DateTime, Float, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Form(Base):
    __tablename__ = "forms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Opaque identifier supplied by the auth layer
    owner_id = Column(String, nullable=False)

    title = Column(String, nullable=False)

    # Validated FormSchema (title, description, fields)
    content = Column(JSONB, nullable=False)

    # Summary embedding, written once at creation
    embedding = Column(ARRAY(Float), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    # Relationships
    submissions = relationship(
        "FormSubmission",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormSubmission.submitted_at"
    )

    # Indexes
    __table_args__ = (
        Index('idx_form_owner_created', 'owner_id', 'created_at'),
    )
