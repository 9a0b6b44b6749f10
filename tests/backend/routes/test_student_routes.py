import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from backend.auth.passwords import verify_password
from backend.models.student import Student
from backend.routes.student_routes import (
    StudentCreateRequest,
    StudentUpdateRequest,
    delete_student,
    list_students,
    update_student,
)


class _BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def query(self, *_args, **_kwargs):
        raise OperationalError('SELECT', {}, Exception('database is locked'))

    def rollback(self):
        self.rolled_back = True


def test_create_request_normalizes_fields() -> None:
    request = StudentCreateRequest(
        firstName='  Grace ',
        lastName=' Hopper',
        email=' GRACE@EXAMPLE.EDU ',
        password='cobol',
    )

    assert request.first_name == 'Grace'
    assert request.last_name == 'Hopper'
    assert request.email == 'grace@example.edu'
    assert request.username == ''


@pytest.mark.parametrize('email', ['', '   ', 'not-an-email'])
def test_create_request_rejects_invalid_email(email: str) -> None:
    with pytest.raises(ValidationError):
        StudentCreateRequest(email=email, password='secret')


def test_create_hashes_password_like_register(client, db_session, student_payload) -> None:
    response = client.post('/api/students', json=student_payload)

    assert response.status_code == 200
    assert response.json()['message'] == 'Student created.'
    stored = db_session.query(Student).filter(Student.id == response.json()['id']).one()
    assert stored.password != student_payload['password']
    assert verify_password(student_payload['password'], stored.password)


def test_create_rejects_email_already_registered(client, db_session, student_payload) -> None:
    client.post('/api/register', json=student_payload)

    response = client.post('/api/students', json=student_payload)

    assert response.status_code == 400
    assert response.json() == {'detail': 'User already exists.'}
    assert db_session.query(Student).count() == 1


def test_register_then_list_shows_projected_record_once(client, student_payload) -> None:
    student_id = client.post('/api/register', json=student_payload).json()['id']

    response = client.get('/api/students')

    assert response.status_code == 200
    assert response.json() == [
        {
            'id': student_id,
            'firstName': 'Ada',
            'lastName': 'Lovelace',
            'email': 'ada@example.edu',
            'contact': '09171234567',
        }
    ]


def test_list_orders_by_id(client, student_payload) -> None:
    client.post('/api/register', json={**student_payload, 'email': 'b@example.edu'})
    client.post('/api/register', json={**student_payload, 'email': 'a@example.edu'})

    emails = [student['email'] for student in client.get('/api/students').json()]

    assert emails == ['b@example.edu', 'a@example.edu']


def test_update_replaces_all_fields(client, db_session, student_payload) -> None:
    student_id = client.post('/api/register', json=student_payload).json()['id']
    updated = {
        'firstName': 'Augusta',
        'lastName': 'King',
        'username': 'countess',
        'email': 'augusta@example.edu',
        'contact': '000',
        'password': 'new-password',
    }

    response = client.put(f'/api/students/{student_id}', json=updated)

    assert response.status_code == 200
    assert response.json() == {'message': 'Student updated.', 'rowsAffected': 1}
    stored = db_session.query(Student).filter(Student.id == student_id).one()
    assert (stored.first_name, stored.last_name, stored.username, stored.email, stored.contact) == (
        'Augusta',
        'King',
        'countess',
        'augusta@example.edu',
        '000',
    )
    assert verify_password('new-password', stored.password)


def test_update_without_password_keeps_existing_hash(client, db_session, student_payload) -> None:
    student_id = client.post('/api/register', json=student_payload).json()['id']
    payload = {key: value for key, value in student_payload.items() if key != 'password'}

    response = client.put(f'/api/students/{student_id}', json={**payload, 'contact': '111'})

    assert response.status_code == 200
    stored = db_session.query(Student).filter(Student.id == student_id).one()
    assert stored.contact == '111'
    assert verify_password(student_payload['password'], stored.password)


def test_update_missing_student_succeeds_with_zero_rows(client, student_payload) -> None:
    response = client.put('/api/students/999', json=student_payload)

    assert response.status_code == 200
    assert response.json() == {'message': 'Student updated.', 'rowsAffected': 0}
    assert client.get('/api/students').json() == []


def test_update_rejects_email_owned_by_another_student(client, db_session, student_payload) -> None:
    client.post('/api/register', json=student_payload)
    other_id = client.post('/api/register', json={**student_payload, 'email': 'other@example.edu'}).json()['id']

    response = client.put(f'/api/students/{other_id}', json=student_payload)

    assert response.status_code == 400
    assert response.json() == {'detail': 'Email already in use.'}
    assert db_session.query(Student).filter(Student.id == other_id).one().email == 'other@example.edu'


def test_delete_removes_student_and_is_safe_to_repeat(client, student_payload) -> None:
    student_id = client.post('/api/register', json=student_payload).json()['id']

    first = client.delete(f'/api/students/{student_id}')
    second = client.delete(f'/api/students/{student_id}')

    assert first.json() == {'message': 'Student deleted.', 'rowsAffected': 1}
    assert second.status_code == 200
    assert second.json() == {'message': 'Student deleted.', 'rowsAffected': 0}
    assert client.get('/api/students').json() == []


def test_list_students_returns_500_on_database_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.routes.student_routes.ensure_database_ready', lambda: None)

    with pytest.raises(HTTPException) as exception_info:
        list_students(db=_BrokenSession())

    assert exception_info.value.status_code == 500
    assert exception_info.value.detail == 'Database error.'


def test_update_student_rolls_back_on_database_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.routes.student_routes.ensure_database_ready', lambda: None)
    db = _BrokenSession()

    with pytest.raises(HTTPException) as exception_info:
        update_student(student_id=1, data=StudentUpdateRequest(email='a@example.edu'), db=db)

    assert exception_info.value.status_code == 500
    assert db.rolled_back


def test_delete_student_rolls_back_on_database_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.routes.student_routes.ensure_database_ready', lambda: None)
    db = _BrokenSession()

    with pytest.raises(HTTPException) as exception_info:
        delete_student(student_id=1, db=db)

    assert exception_info.value.status_code == 500
    assert db.rolled_back


def test_update_without_username_keeps_stored_username(client, db_session, student_payload) -> None:
    student_id = client.post('/api/register', json=student_payload).json()['id']
    payload = {**student_payload, 'username': '', 'password': '', 'contact': '555'}

    response = client.put(f'/api/students/{student_id}', json=payload)

    assert response.json() == {'message': 'Student updated.', 'rowsAffected': 1}
    stored = db_session.query(Student).filter(Student.id == student_id).one()
    assert stored.username == 'ada'
    assert stored.contact == '555'


def test_update_missing_student_with_taken_email_succeeds_with_zero_rows(client, student_payload) -> None:
    client.post('/api/register', json=student_payload)

    response = client.put('/api/students/999', json=student_payload)

    assert response.status_code == 200
    assert response.json() == {'message': 'Student updated.', 'rowsAffected': 0}
