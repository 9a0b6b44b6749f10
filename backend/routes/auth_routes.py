import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_email, get_session_store, get_session_token
from backend.auth.passwords import verify_password
from backend.auth.sessions import SessionStore, new_session_token
from backend.database import ensure_database_ready, get_db
from backend.models.student import Student
from backend.routes.student_routes import (
    DATABASE_ERROR_DETAIL,
    CreatedResponse,
    StudentCreateRequest,
    create_student,
)

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_DETAIL = 'Invalid credentials.'


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    id: int
    first_name: str = Field(alias='firstName')
    last_name: str = Field(alias='lastName')
    username: str
    email: str
    contact: str

    class Config:
        populate_by_name = True


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse


class MessageResponse(BaseModel):
    message: str


@router.post('/register', response_model=CreatedResponse)
def register(data: StudentCreateRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    student = create_student(data, db)
    logger.info('Registered student %s.', student.id)

    return CreatedResponse(message='Registered successfully.', id=student.id)


@router.post('/login', response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    ensure_database_ready()

    try:
        student = db.query(Student).filter(Student.email == data.email).first()
    except SQLAlchemyError as exc:
        logger.exception('Failed to look up student for login.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc

    # Same response whether the email is unknown or the password is wrong.
    if student is None or not verify_password(data.password, student.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
        )

    token = new_session_token()
    sessions.put(token, student.email)
    logger.info('Student %s logged in.', student.id)

    return TokenResponse(token=token)


@router.post('/logout', response_model=MessageResponse)
def logout(
    token: str = Depends(get_session_token),
    sessions: SessionStore = Depends(get_session_store),
):
    if not sessions.delete(token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Unauthorized.')

    return MessageResponse(message='Logged out.')


@router.get('/profile', response_model=ProfileEnvelope)
def profile(email: str = Depends(get_current_email), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        student = db.query(Student).filter(Student.email == email).first()
    except SQLAlchemyError as exc:
        logger.exception('Failed to load profile.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc

    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found.')

    return ProfileEnvelope(
        profile=ProfileResponse(
            id=student.id,
            first_name=student.first_name or '',
            last_name=student.last_name or '',
            username=student.username or '',
            email=student.email,
            contact=student.contact or '',
        )
    )
