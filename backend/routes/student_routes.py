import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.passwords import PasswordHashingError, hash_password
from backend.database import ensure_database_ready, get_db
from backend.models.student import Student

router = APIRouter(tags=['students'])

logger = logging.getLogger(__name__)

DATABASE_ERROR_DETAIL = 'Database error.'


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError('Email is required.')
    if '@' not in normalized:
        raise ValueError('Email must be a valid address.')
    return normalized


class StudentFields(BaseModel):
    first_name: str = Field(default='', alias='firstName')
    last_name: str = Field(default='', alias='lastName')
    username: str = ''
    email: str
    contact: str = ''

    class Config:
        populate_by_name = True

    @field_validator('first_name', 'last_name', 'username', 'contact')
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)


class StudentCreateRequest(StudentFields):
    password: str = Field(min_length=1)


class StudentUpdateRequest(StudentFields):
    # Blank username or password keeps the stored value.
    username: str | None = None
    password: str | None = None


class StudentSummaryResponse(BaseModel):
    id: int
    first_name: str = Field(alias='firstName')
    last_name: str = Field(alias='lastName')
    email: str
    contact: str

    class Config:
        populate_by_name = True


class CreatedResponse(BaseModel):
    message: str
    id: int


class MutationResponse(BaseModel):
    message: str
    rows_affected: int = Field(alias='rowsAffected')

    class Config:
        populate_by_name = True


def to_summary(student: Student) -> StudentSummaryResponse:
    return StudentSummaryResponse(
        id=student.id,
        first_name=student.first_name or '',
        last_name=student.last_name or '',
        email=student.email,
        contact=student.contact or '',
    )


def hash_or_fail(password: str) -> str:
    try:
        return hash_password(password)
    except PasswordHashingError as exc:
        logger.exception('Password hashing failed.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Hash error.',
        ) from exc


def create_student(data: StudentCreateRequest, db: Session) -> Student:
    """Insert a student after checking email uniqueness.

    This is the only creation path; the password is always stored hashed.
    """
    try:
        existing = db.query(Student).filter(Student.email == data.email).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='User already exists.',
            )

        student = Student(
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            email=data.email,
            contact=data.contact,
            password=hash_or_fail(data.password),
        )
        db.add(student)
        db.commit()
        db.refresh(student)

        return student
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='User already exists.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to insert student.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc


@router.get('/students', response_model=list[StudentSummaryResponse])
def list_students(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        students = db.query(Student).order_by(Student.id.asc()).all()

        return [to_summary(student) for student in students]
    except SQLAlchemyError as exc:
        logger.exception('Failed to list students.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc


@router.post('/students', response_model=CreatedResponse)
def add_student(data: StudentCreateRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    student = create_student(data, db)
    logger.info('Created student %s.', student.id)

    return CreatedResponse(message='Student created.', id=student.id)


@router.put('/students/{student_id}', response_model=MutationResponse)
def update_student(student_id: int, data: StudentUpdateRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        if db.query(Student.id).filter(Student.id == student_id).first() is None:
            return MutationResponse(message='Student updated.', rows_affected=0)

        email_owner = db.query(Student.id).filter(
            Student.email == data.email,
            Student.id != student_id,
        ).first()
        if email_owner:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Email already in use.',
            )

        values = {
            Student.first_name: data.first_name,
            Student.last_name: data.last_name,
            Student.email: data.email,
            Student.contact: data.contact,
        }
        if data.username:
            values[Student.username] = data.username
        if data.password:
            values[Student.password] = hash_or_fail(data.password)

        rows_affected = db.query(Student).filter(Student.id == student_id).update(
            values,
            synchronize_session=False,
        )
        db.commit()

        return MutationResponse(message='Student updated.', rows_affected=rows_affected)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Email already in use.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to update student %s.', student_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc


@router.delete('/students/{student_id}', response_model=MutationResponse)
def delete_student(student_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        rows_affected = db.query(Student).filter(Student.id == student_id).delete(
            synchronize_session=False,
        )
        db.commit()

        return MutationResponse(message='Student deleted.', rows_affected=rows_affected)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete student %s.', student_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_DETAIL,
        ) from exc
