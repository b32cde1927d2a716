"""
Creation ledger models.

A Creation is one recorded generation result. Likes live in a join table with a
unique (creation_id, user_id) pair so each like/unlike is a single-row insert or
delete rather than a rewrite of the whole set.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, false
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class Creation(Base):
    __tablename__ = "creations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    content = Column(Text, nullable=False)  # generated text or public asset URL
    type = Column(String(32), nullable=False)  # "article", "blog-title", "image", "resume-review"
    publish = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    like_rows = relationship(
        "CreationLike",
        back_populates="creation",
        lazy="selectin",
        order_by="CreationLike.id",
    )

    __table_args__ = (
        Index('idx_creations_publish_created', 'publish', 'created_at'),
    )

    @property
    def likes(self) -> list:
        return [row.user_id for row in self.like_rows]

    def __repr__(self):
        return f"<Creation(id={self.id}, type='{self.type}', publish={self.publish})>"


class CreationLike(Base):
    __tablename__ = "creation_likes"

    id = Column(Integer, primary_key=True)
    creation_id = Column(Integer, ForeignKey("creations.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    creation = relationship("Creation", back_populates="like_rows")

    __table_args__ = (
        UniqueConstraint('creation_id', 'user_id', name='uq_creation_like'),
    )
