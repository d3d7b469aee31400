"""JSON schema validation helpers for tool arguments."""
from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Tuple

from jsonschema import Draft202012Validator
from referencing import Registry, Resource

_SCHEMA_PACKAGE = "apkbridge.api.schemas"


@lru_cache(maxsize=None)
def _schema_contents(name: str) -> Dict[str, Any]:
    with resources.files(_SCHEMA_PACKAGE).joinpath(name).open("r", encoding="utf-8") as handle:
        return json.load(handle)


@lru_cache(maxsize=1)
def _registry() -> Registry:
    registry = Registry()
    package = resources.files(_SCHEMA_PACKAGE)
    for entry in package.iterdir():
        if entry.name.endswith(".json"):
            contents = _schema_contents(entry.name)
            schema_id = contents.get("$id")
            if schema_id:
                registry = registry.with_resource(schema_id, Resource.from_contents(contents))
    return registry


@lru_cache(maxsize=None)
def _load_schema(name: str) -> Draft202012Validator:
    schema = _schema_contents(name)
    return Draft202012Validator(schema, registry=_registry())


def load_schema_document(name: str) -> Dict[str, Any]:
    """Return a copy of the raw schema, suitable for publishing as ``inputSchema``."""

    return json.loads(json.dumps(_schema_contents(name)))


def validate_payload(schema_name: str, payload: Any) -> Tuple[bool, List[str]]:
    validator = _load_schema(schema_name)
    errors: List[str] = []
    found = sorted(
        validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path]
    )
    for error in found:
        location = "/".join(str(part) for part in error.path)
        errors.append(f"{location}: {error.message}" if location else error.message)
    return not errors, errors
