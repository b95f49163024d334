from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from ..database import Base

MAX_TITLE_LENGTH = 255

POST_INDEXES = (
    # Listing by publication status in creation order
    Index("ix_posts_published_id", "published", "id"),
)


class Post(Base):
    """SQLAlchemy model representing a post.

    Attributes:
        id (int): Unique post identifier, assigned by the store.
        title (str): Post title.
        content (str): Full post content (unbounded text).
        published (bool): Publication status, False until toggled.
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime): Last modification timestamp (UTC).
    """

    __tablename__ = "posts"
    __table_args__ = POST_INDEXES

    id = Column(
        Integer,
        primary_key=True,
        index=True,
        doc="Unique post identifier",
    )
    title = Column(
        String(MAX_TITLE_LENGTH),
        nullable=False,
        doc="Post title",
    )
    content = Column(
        Text,
        nullable=False,
        doc="Full post content",
    )
    published = Column(
        Boolean,
        default=False,
        nullable=False,
        doc="Whether the post is published",
    )
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Post creation timestamp",
    )
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        doc="Last modification timestamp",
    )

    def __repr__(self) -> str:
        """Return the formal string representation for debugging."""
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = title_value[:30] + "..." if len(title_value) > 30 else title_value
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, published={self.published})>"

    def __str__(self) -> str:
        status = "Published" if getattr(self, "published", False) else "Draft"
        title = getattr(self, "title", "") or ""
        return f"Post '{title}' ({status})"
