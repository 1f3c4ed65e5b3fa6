import json
import logging
from typing import Any, Dict

from app.core.constants import INVALID_OPTIONS_FORMAT
from app.core.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


def parse_option_payload(option: Any) -> Dict[str, Any]:
    """Normalize a question's options to a label -> text map.

    Accepts the map itself or its JSON encoding; anything else, including a
    JSON document that is not a non-empty object, is rejected.
    """
    if isinstance(option, str):
        try:
            option = json.loads(option)
        except ValueError as e:
            logger.warning(f"Error parsing options JSON: {e}")
            raise InvalidRequestError(INVALID_OPTIONS_FORMAT)

    if not isinstance(option, dict) or not option:
        raise InvalidRequestError(INVALID_OPTIONS_FORMAT)

    return {str(label): text for label, text in option.items()}
