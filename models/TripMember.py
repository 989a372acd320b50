from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
from database import Base
import enum

class MemberRole(str, enum.Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class TripMember(Base):
    __tablename__ = "trip_members"
    __table_args__ = (
        UniqueConstraint("trip_id", "invited_email", name="uq_trip_member_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    # Linked only when the invited email already belongs to a registered user
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    role = Column(
        SQLEnum(MemberRole, name="member_role", values_callable=lambda e: [m.value for m in e]),
        default=MemberRole.EDITOR,
        nullable=False,
    )
    invited_email = Column(String(255), nullable=False, index=True)  # always lower case
    status = Column(
        SQLEnum(InvitationStatus, name="invitation_status", values_callable=lambda e: [m.value for m in e]),
        default=InvitationStatus.PENDING,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="members")
    user = relationship("User", back_populates="invitations")
