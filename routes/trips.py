import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.Activity import Activity
from models.Trip import Trip
from schemas import ActivityWrite, MessageRead, TripRead, TripWrite
from utils.logger import API_LOGGER_NAME

router = APIRouter(prefix="/trips", tags=["Trips"])
logger = logging.getLogger(API_LOGGER_NAME)

TRIP_NOT_FOUND = "Trip not found."


@router.post("", response_model=TripRead, status_code=status.HTTP_201_CREATED)
def create_trip(payload: TripWrite, db: Session = Depends(get_db)):
    try:
        trip = Trip(**payload.model_dump())
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating a new trip")
        raise HTTPException(status_code=500, detail="Failed to create trip.")


@router.get("", response_model=List[TripRead])
def list_trips(db: Session = Depends(get_db)):
    try:
        return db.query(Trip).order_by(Trip.id).all()
    except SQLAlchemyError:
        logger.exception("Error getting trips")
        raise HTTPException(status_code=500, detail="Failed to fetch trips.")


@router.delete("/{trip_id}", response_model=MessageRead)
def delete_trip(trip_id: int, db: Session = Depends(get_db)):
    try:
        t = db.query(Trip).filter(Trip.id == trip_id).first()
        if not t:
            raise HTTPException(status_code=404, detail=TRIP_NOT_FOUND)
        title = t.title
        db.delete(t)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting trip %s", trip_id)
        raise HTTPException(status_code=500, detail="Failed to delete trip.")

    return {"message": f"Trip '{title}' was deleted successfully."}


@router.post("/{trip_id}/activities", response_model=TripRead, status_code=status.HTTP_201_CREATED)
def add_activity(trip_id: int, payload: ActivityWrite, db: Session = Depends(get_db)):
    """Append one activity to a trip and return the updated trip.

    The activity date is not checked against the trip's date range.
    """
    try:
        t = db.query(Trip).filter(Trip.id == trip_id).first()
        if not t:
            raise HTTPException(status_code=404, detail=TRIP_NOT_FOUND)

        t.activities.append(Activity(**payload.model_dump()))
        t.updated_at = func.now()
        db.commit()
        db.refresh(t)
        return t
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error adding activity to trip %s", trip_id)
        raise HTTPException(status_code=500, detail="Failed to add activity.")
