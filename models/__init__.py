# Importing every model registers its table on Base.metadata
from .User import User
from .Trip import Trip
from .Activity import Activity, ActivityType
from .TripMember import TripMember, MemberRole, InvitationStatus

__all__ = [
    "User",
    "Trip",
    "Activity",
    "ActivityType",
    "TripMember",
    "MemberRole",
    "InvitationStatus",
]
