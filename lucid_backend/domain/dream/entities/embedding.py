"""Vector embedding of a dream, one row per dream."""
from datetime import datetime
from typing import List
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy import Column, DateTime, String, ForeignKey
from sqlalchemy.orm import relationship
from pgvector.sqlalchemy import Vector

from lucid_backend.config import settings
from lucid_backend.infrastructure.db.meta import Base

# Column width is fixed per deployment; all rows come from the configured model.
EMBEDDING_DIMENSIONS = settings().embedding_dimensions


class DreamEmbedding(Base):
    __tablename__ = "dream_embeddings"

    dream_id   = Column(
        UUID(as_uuid=True),
        ForeignKey("dreams.id", ondelete="CASCADE"),
        primary_key=True,
    )
    embedding  = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    model      = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    dream = relationship("Dream", back_populates="embedding")

    @property
    def vector(self) -> List[float]:
        """Decoded vector; pgvector hands back a numpy array."""
        if self.embedding is None:
            return []
        return [float(x) for x in self.embedding]
