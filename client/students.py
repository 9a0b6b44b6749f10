import logging

from client.api import ApiError, StudentApi

logger = logging.getLogger(__name__)


class StudentList:
    """Client-side list of students kept in step with the API.

    The list is fetched on construction. Every successful mutation refetches
    the full list so local state never drifts from the server. ``error`` holds
    the message of the most recent failure and is cleared by the next success.
    """

    def __init__(self, api: StudentApi, fetch: bool = True) -> None:
        self.api = api
        self.students: list[dict] = []
        self.error: str | None = None
        if fetch:
            self.fetch()

    def _fail(self, message: str, exc: ApiError) -> bool:
        logger.exception("%s (status %s)", message, exc.status_code)
        self.error = message
        return False

    def fetch(self) -> bool:
        try:
            self.students = self.api.list_students()
        except ApiError as exc:
            return self._fail("Failed to fetch students", exc)
        self.error = None
        return True

    def add(self, student: dict) -> bool:
        try:
            self.api.register(student)
        except ApiError as exc:
            return self._fail("Failed to register student", exc)
        return self.fetch()

    def update(self, student_id: int, student: dict) -> bool:
        try:
            self.api.update_student(student_id, student)
        except ApiError as exc:
            return self._fail("Failed to update student", exc)
        return self.fetch()

    def delete(self, student_id: int) -> bool:
        try:
            self.api.delete_student(student_id)
        except ApiError as exc:
            return self._fail("Failed to delete student", exc)
        return self.fetch()

    def find(self, student_id: int) -> dict | None:
        return next((student for student in self.students if student.get("id") == student_id), None)
