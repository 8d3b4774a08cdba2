"""Database table definitions for indexed documents and their tags"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text, String, UniqueConstraint


class DocumentTag(SQLModel, table=True):
    """Many-to-many link between documents and tags, keeping display order"""
    __tablename__ = "document_tags"
    document_id: UUID = Field(foreign_key="documents.id", primary_key=True)
    tag_name: str = Field(foreign_key="tags.name", primary_key=True)
    position: int = Field(..., nullable=False, description="Position of the tag as written in front-matter")


class DocumentRow(SQLModel, table=True):
    """A post or page as last seen on disk"""
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("root", "path"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., sa_column=Column(Text, nullable=False, unique=True, index=True))
    path: str = Field(..., sa_column=Column(Text, nullable=False))
    root: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    template: str = Field(..., sa_column=Column(String(16), nullable=False))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True, index=True))
    draft: bool = Field(default=False, nullable=False, index=True)
    category: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    social_image: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Tag(SQLModel, table=True):
    """A tag label shared across posts"""
    __tablename__ = "tags"
    name: str = Field(primary_key=True)
