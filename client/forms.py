import logging

from client.registry import form_fields
from client.students import StudentList

logger = logging.getLogger(__name__)


class StudentForm:
    """Editable student record backing the create/edit form.

    ``editing_id`` is None while creating a new student. ``submit`` only
    clears the form after the API confirms the change.
    """

    def __init__(self, students: StudentList, registry: str = "student") -> None:
        self.students = students
        fields = form_fields(registry)
        self.field_names = [field["name"] for field in fields]
        self.required_names = [field["name"] for field in fields if field.get("required")]
        self.values: dict[str, str] = {}
        self.editing_id: int | None = None
        self.reset()

    @property
    def error(self) -> str | None:
        return self.students.error

    def reset(self) -> None:
        self.values = {name: "" for name in self.field_names}
        self.editing_id = None

    def handle_change(self, name: str, value: str) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown form field: {name}")
        self.values[name] = value

    def start_edit(self, student: dict) -> None:
        self.values = {name: str(student.get(name) or "") for name in self.field_names}
        # Stored passwords are never returned; blank means keep the current one.
        if "password" in self.values:
            self.values["password"] = ""
        self.editing_id = student["id"]

    def missing_required(self) -> list[str]:
        return [name for name in self.required_names if not self.values.get(name, "").strip()]

    def submit(self) -> bool:
        payload = dict(self.values)
        # Blank username and password are allowed while editing and keep the stored values.
        missing = self.missing_required() if self.editing_id is None else []
        if missing:
            self.students.error = "Missing required fields: " + ", ".join(missing)
            return False
        if self.editing_id is not None:
            succeeded = self.students.update(self.editing_id, payload)
        else:
            succeeded = self.students.add(payload)

        if succeeded:
            self.reset()
        else:
            logger.info("Keeping form contents after failed submit: %s", self.students.error)
        return succeeded
