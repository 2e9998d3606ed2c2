# Standard library imports
import enum

# Third-party imports
from sqlalchemy import Column, Enum as SQLEnum, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from civicpulse.models.base import Base
from civicpulse.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class IssueStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class IssueCategory(str, enum.Enum):
    ROAD = "road"
    WATER = "water"
    SANITATION = "sanitation"
    ELECTRICITY = "electricity"
    OTHER = "other"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Issue(Base, UUIDTimeStampMixin):
    __tablename__ = "issues"

    # Issue details
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(
        SQLEnum(IssueCategory, values_callable=_enum_values, name="issue_category"),
        nullable=False,
        index=True,
    )
    status = Column(
        SQLEnum(IssueStatus, values_callable=_enum_values, name="issue_status"),
        nullable=False,
        default=IssueStatus.PENDING,
        index=True,
    )

    # Location: free-text label plus optional coordinates
    location = Column(String(300), nullable=False, default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    image_url = Column(String(1024), nullable=True)

    # Ownership and voting
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    votes = Column(Integer, nullable=False, default=0, index=True)

    vote_records = relationship("Vote", back_populates="issue", cascade="all, delete-orphan", passive_deletes=True)
