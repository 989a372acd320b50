import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.User import User
from schemas import AuthRead, LoginWrite, SignupWrite
from utils import TokenIssueError, create_access_token
from utils.logger import API_LOGGER_NAME

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(API_LOGGER_NAME)

SIGNUP_FAILED = "Failed to create account. Username or email may already exist."
# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"


def _find_existing_user(db: Session, username: str, email: str) -> Optional[User]:
    return db.query(User).filter(or_(User.username == username, User.email == email)).first()


def _auth_response(user: User, settings: Settings) -> dict:
    token = create_access_token(user.id, settings.JWT_SECRET, settings.JWT_EXPIRES_DAYS)
    return {"token": token, "user": user}


@router.post("/signup", response_model=AuthRead, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupWrite,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        if _find_existing_user(db, payload.username, payload.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SIGNUP_FAILED)

        new_user = User(username=payload.username, email=payload.email)
        new_user.set_password(payload.password)
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
        return _auth_response(new_user, settings)
    except IntegrityError:
        db.rollback()
        # only a concurrent signup with the same username/email is a conflict
        if _find_existing_user(db, payload.username, payload.email):
            logger.warning("Signup conflict for username=%s email=%s", payload.username, payload.email)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SIGNUP_FAILED)
        logger.exception("Error in signup")
        raise HTTPException(status_code=500, detail=SIGNUP_FAILED)
    except (SQLAlchemyError, TokenIssueError):
        db.rollback()
        logger.exception("Error in signup")
        raise HTTPException(status_code=500, detail=SIGNUP_FAILED)


@router.post("/login", response_model=AuthRead)
def login(
    payload: LoginWrite,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = db.query(User).filter(User.email == payload.email).first()
        if not user or not user.correct_password(payload.password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
        return _auth_response(user, settings)
    except (SQLAlchemyError, TokenIssueError):
        logger.exception("Error in login")
        raise HTTPException(status_code=500, detail="Failed to login.")
