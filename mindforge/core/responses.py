"""Success envelope helpers.

Routers return `{"status": "success", "data": {...}}`; failures are shaped by
the handlers in `mindforge.core.errors`.
"""

from typing import Any

from pydantic import BaseModel


def dump(value: Any) -> Any:
    """Serialize schemas (and lists of them) with camelCase keys."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [dump(item) for item in value]
    if isinstance(value, dict):
        return {key: dump(item) for key, item in value.items()}
    return value


def success(message: str | None = None, results: int | None = None, **data: Any) -> dict:
    """
    Build a success envelope.

    Keyword arguments become members of `data`:

        success(bootcamp=BootcampRead(...))
        -> {"status": "success", "data": {"bootcamp": {...}}}
    """
    body: dict[str, Any] = {"status": "success"}
    if message is not None:
        body["message"] = message
    if results is not None:
        body["results"] = results
    body["data"] = {key: dump(value) for key, value in data.items()}
    return body
