from sqlalchemy import Column, Integer, String, Date, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(150), nullable=False)
    destination = Column(String(150), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Activities only exist inside their trip, in the order they were added
    activities = relationship(
        "Activity",
        back_populates="trip",
        order_by="Activity.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    members = relationship("TripMember", back_populates="trip", cascade="all, delete-orphan")
