import json
from typing import Optional

from pydantic import ValidationError

from analytics_app.schemas.collect import CollectRequestBody


def get_json_body(raw: Optional[bytes]) -> Optional[CollectRequestBody]:
    """
    Parse the collect request body.

    Returns None for an empty body, invalid JSON or a body that does not
    match the expected shape. Never raises.
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return CollectRequestBody.model_validate(data)
    except ValidationError:
        return None
