"""JSON response classes serialized with orjson.

orjson handles ``date``/``datetime`` natively, which matters here: created
resources are echoed back with the date attributes the validation pipe
coerced.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """JSON response rendered with orjson and sorted keys."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json", exclude_none=True)

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)


class JsonApiResponse(ORJSONResponse):
    """Response carrying a JSON:API document."""

    media_type = "application/vnd.api+json"
