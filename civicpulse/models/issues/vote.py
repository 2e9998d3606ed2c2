# Third-party imports
from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from civicpulse.models.base import Base
from civicpulse.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Vote(Base, UUIDTimeStampMixin):
    __tablename__ = "issue_votes"
    # At most one vote per (issue, user); concurrent duplicates fail here
    __table_args__ = (UniqueConstraint("issue_id", "user_id", name="unique_issue_voter"),)

    issue_id = Column(Uuid(as_uuid=True), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)

    issue = relationship("Issue", back_populates="vote_records")
