"""SQLAlchemy models for post categories."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base


class Category(Base):
    """Topic bucket a post is filed under, addressed publicly by slug."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
