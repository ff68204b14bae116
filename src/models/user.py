"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Signed-in account, created on first GitHub sign-in."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    locale: Mapped[str] = mapped_column(String(5), default="en")

    # OAuth provider ID
    github_id: Mapped[int | None] = mapped_column(unique=True, index=True, nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
