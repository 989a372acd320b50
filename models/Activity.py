from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from database import Base
import enum

class ActivityType(str, enum.Enum):
    ACTIVITY = "activity"
    FLIGHT = "flight"
    HOTEL = "hotel"
    FOOD = "food"

class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(20), nullable=True)  # free-form, e.g. "10:00"
    description = Column(Text, nullable=True)
    type = Column(
        SQLEnum(ActivityType, name="activity_type", values_callable=lambda e: [m.value for m in e]),
        default=ActivityType.ACTIVITY,
        nullable=False,
    )

    trip = relationship("Trip", back_populates="activities")
