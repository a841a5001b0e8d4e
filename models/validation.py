"""JSON schema checks for API payloads and the config file."""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml
from jsonschema import validate, ValidationError

from .errors import FormError

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"


@lru_cache(maxsize=None)
def load_schema() -> Dict[str, Any]:
    """Load all schemas from schema.yaml, keyed by payload kind."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def describe_error(error: ValidationError) -> str:
    """Turn a jsonschema error into a message naming the offending field."""
    if error.validator == "required":
        return error.message
    if error.path:
        field = ".".join(str(p) for p in error.path)
        return f"Invalid {field}: {error.message}"
    return error.message


def validate_payload(kind: str, payload: Dict[str, Any]) -> None:
    """Validate a payload against its schema, raising FormError on failure."""
    schema = load_schema()[kind]
    try:
        validate(instance=payload, schema=schema)
    except ValidationError as e:
        raise FormError(describe_error(e)) from e
