"""Static JSON registries describing client forms.

Documents live at ``registries/<kind>/<name>.json`` next to this module.
"""

import json
from functools import lru_cache
from pathlib import Path

REGISTRY_ROOT = Path(__file__).resolve().parent / "registries"


class RegistryError(Exception):
    """A registry document could not be read."""


class RegistryNotFoundError(RegistryError):
    """No registry document exists for the requested kind and name."""


@lru_cache(maxsize=None)
def load_registry(kind: str, name: str) -> dict:
    path = REGISTRY_ROOT / kind / f"{name}.json"
    if not path.is_file():
        raise RegistryNotFoundError(f"No {kind} registry named {name!r}")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RegistryError(f"Invalid JSON in {path}") from exc
    if not isinstance(document, dict):
        raise RegistryError(f"{path} must contain a JSON object")
    return document


def form_fields(name: str) -> list[dict]:
    fields = load_registry("forms", name).get("fields")
    if not isinstance(fields, list) or not all(isinstance(field, dict) and "name" in field for field in fields):
        raise RegistryError(f"Form {name!r} has no valid field list")
    return fields
