from datetime import datetime
from uuid import uuid4
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy import (
    Column, DateTime, Float, Text, Index, desc
)
from sqlalchemy.orm import relationship
from lucid_backend.infrastructure.db.meta import Base
from lucid_backend.domain.dream.entities.embedding import DreamEmbedding  # noqa: F401  registers relationship target


class Dream(Base):
    __tablename__ = "dreams"
    id         = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id    = Column(UUID(as_uuid=True), nullable=False, index=True)
    content    = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    sleep_hours = Column(Float, nullable=True)

    # Full LLM response plus the per-perspective sections parsed out of it
    interpretation        = Column(Text, nullable=True)
    jungian_analysis      = Column(Text, nullable=True)
    freudian_analysis     = Column(Text, nullable=True)
    cognitive_analysis    = Column(Text, nullable=True)
    synthesized_analysis  = Column(Text, nullable=True)

    # Structured labels extracted from the interpretation's JSON block
    symbols              = Column(ARRAY(Text), default=list, nullable=False)
    emotions             = Column(ARRAY(Text), default=list, nullable=False)
    themes               = Column(ARRAY(Text), default=list, nullable=False)
    archetypal_figures   = Column(ARRAY(Text), default=list, nullable=False)
    cognitive_patterns   = Column(ARRAY(Text), default=list, nullable=False)
    wish_indicators      = Column(ARRAY(Text), default=list, nullable=False)
    reflection_questions = Column(ARRAY(Text), default=list, nullable=False)

    embedding = relationship(
        "DreamEmbedding",
        back_populates="dream",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('ix_dreams_user_created', 'user_id', desc('created_at')),
    )
