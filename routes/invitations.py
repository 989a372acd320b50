import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.Trip import Trip
from models.TripMember import TripMember, MemberRole, InvitationStatus
from models.User import User
from schemas import InvitationWrite, InvitationCreated, InvitationAccepted, PendingInvitationRead
from utils.logger import API_LOGGER_NAME

router = APIRouter(tags=["Invitations"])
logger = logging.getLogger(API_LOGGER_NAME)

ALREADY_INVITED = "User has already been invited to this trip."


def _find_invitation(db: Session, trip_id: int, email: str) -> Optional[TripMember]:
    return db.query(TripMember).filter(
        TripMember.trip_id == trip_id,
        TripMember.invited_email == email,
    ).first()


@router.post("/trips/{trip_id}/invite", response_model=InvitationCreated, status_code=status.HTTP_201_CREATED)
def invite_member(trip_id: int, payload: InvitationWrite, db: Session = Depends(get_db)):
    """Invite an email address to collaborate on a trip.

    The (trip, email) pair is unique: a duplicate is rejected by the lookup
    below, or by the unique constraint when two requests race past it.
    No email is delivered; the invitation is only logged.
    """
    email = payload.email.lower()
    try:
        trip = db.query(Trip).filter(Trip.id == trip_id).first()
        if not trip:
            raise HTTPException(status_code=404, detail="Trip not found.")

        if _find_invitation(db, trip_id, email):
            raise HTTPException(status_code=400, detail=ALREADY_INVITED)

        invited_user = db.query(User).filter(func.lower(User.email) == email).first()
        invitation = TripMember(
            trip_id=trip_id,
            user_id=invited_user.id if invited_user else None,
            invited_email=email,
            role=payload.role or MemberRole.EDITOR,
            status=InvitationStatus.PENDING,
        )
        db.add(invitation)
        db.commit()
        db.refresh(invitation)
    except IntegrityError:
        db.rollback()
        # a racing duplicate; any other constraint failure is a server error
        if _find_invitation(db, trip_id, email):
            logger.warning("Duplicate invitation for %s on trip %s rejected by constraint", email, trip_id)
            raise HTTPException(status_code=400, detail=ALREADY_INVITED)
        logger.exception("Error sending invitation")
        raise HTTPException(status_code=500, detail="Failed to send invitation.")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error sending invitation")
        raise HTTPException(status_code=500, detail="Failed to send invitation.")

    logger.info("Invitation sent to %s for trip: %s", payload.email, trip.title)
    return {"message": f"Invitation sent to {payload.email}", "invitation": invitation}


@router.get("/user/invitations", response_model=List[PendingInvitationRead])
def list_pending_invitations(
    email: Optional[str] = Query(None, description="Email the invitations were sent to"),
    db: Session = Depends(get_db),
):
    # Identity comes from the query string, not from a credential
    if not email:
        raise HTTPException(status_code=400, detail="Email parameter is required")

    try:
        return db.query(TripMember).options(
            joinedload(TripMember.trip)
        ).filter(
            TripMember.invited_email == email.strip().lower(),
            TripMember.status == InvitationStatus.PENDING,
        ).order_by(TripMember.id).all()
    except SQLAlchemyError:
        logger.exception("Error fetching invitations")
        raise HTTPException(status_code=500, detail="Failed to fetch invitations.")


@router.put("/invitations/{invitation_id}/accept", response_model=InvitationAccepted)
def accept_invitation(invitation_id: int, db: Session = Depends(get_db)):
    """Mark an invitation accepted, whatever its current status."""
    try:
        invitation = db.query(TripMember).options(
            joinedload(TripMember.trip)
        ).filter(TripMember.id == invitation_id).first()
        if not invitation:
            raise HTTPException(status_code=404, detail="Invitation not found.")

        invitation.status = InvitationStatus.ACCEPTED
        db.commit()
        db.refresh(invitation)
        trip = invitation.trip
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error accepting invitation %s", invitation_id)
        raise HTTPException(status_code=500, detail="Failed to accept invitation.")

    return {"message": f"You have joined the trip: {trip.title}", "trip": trip}
