"""Thin HTTP wrapper around the student registry API."""

import os
from typing import Any

import httpx
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:4000")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "10"))


class ApiError(Exception):
    """A request failed. ``status_code`` is 0 when no response arrived."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class StudentApi:
    def __init__(self, base_url: str | None = None, http_client: httpx.Client | None = None) -> None:
        self._client = http_client or httpx.Client(
            base_url=base_url or API_BASE_URL,
            timeout=API_TIMEOUT_SECONDS,
        )
        self.token: str | None = None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StudentApi":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc)) from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    def _auth_headers(self) -> dict[str, str]:
        if not self.token:
            raise ApiError(401, "Not logged in.")
        return {"Authorization": f"Bearer {self.token}"}

    def status(self) -> dict:
        return self._request("GET", "/api/status")

    def list_students(self) -> list[dict]:
        return self._request("GET", "/api/students")

    def register(self, student: dict) -> dict:
        return self._request("POST", "/api/register", json=student)

    def update_student(self, student_id: int, student: dict) -> dict:
        return self._request("PUT", f"/api/students/{student_id}", json=student)

    def delete_student(self, student_id: int) -> dict:
        return self._request("DELETE", f"/api/students/{student_id}")

    def login(self, email: str, password: str) -> str:
        body = self._request("POST", "/api/login", json={"email": email, "password": password})
        self.token = body["token"]
        return self.token

    def profile(self) -> dict:
        return self._request("GET", "/api/profile", headers=self._auth_headers())["profile"]

    def logout(self) -> None:
        self._request("POST", "/api/logout", headers=self._auth_headers())
        self.token = None
