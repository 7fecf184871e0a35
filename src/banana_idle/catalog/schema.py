import json
import logging
from functools import lru_cache
from importlib.resources import files as resource_files
from typing import Any, Dict

from jsonschema import Draft202012Validator

from ..errors import CatalogError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _load_catalog_schema() -> Dict[str, Any]:
    """Load the bundled catalog JSON schema (cached; the schema is static)."""
    resource = resource_files("banana_idle.catalog").joinpath("data").joinpath("catalog.schema.json")
    logger.debug("Loading catalog schema from package resources")
    return json.loads(resource.read_text(encoding="utf-8"))


def validate_catalog_dict(data: Dict[str, Any]) -> None:
    """
    Check the shape of raw catalog data before any definitions are built.

    Value rules that span entries (unique ids, a single capstone) are left to
    Catalog itself.

    Raises:
        CatalogError if the data does not match the schema.
    """
    validator = Draft202012Validator(_load_catalog_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        for err in errors:
            logger.error("Catalog schema error at %s: %s", "/".join(str(p) for p in err.path) or "<root>", err.message)
        first = errors[0]
        raise CatalogError(f"Invalid catalog at {list(first.path)}: {first.message}")


__all__ = [
    "validate_catalog_dict",
]
