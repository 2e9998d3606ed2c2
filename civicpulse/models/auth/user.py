# Third-party imports
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

# Local application imports
from civicpulse.models.base import Base
from civicpulse.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class User(UUIDTimeStampMixin, Base):
    """An account; its public profile is (id, name, email, bio)."""

    __tablename__ = "user"

    email: Mapped[str] = mapped_column(
        String(320),
        index=True,
        unique=True,
        nullable=False,
        comment="User's email (acts as username)",
    )
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)

    # Profile fields, editable by the owner only
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __str__(self) -> str:
        return f"User: {self.name} - {self.email}"
