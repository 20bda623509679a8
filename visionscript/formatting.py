"""Pretty-printing of the JSON text returned by the model."""

import json

from visionscript.exceptions import ResultFormatError


def format_json(text: str, indent: int = 2) -> str:
    """Parse model output and re-serialize it with indentation.

    Key order and values are preserved.

    Args:
        text: Raw text returned by the inference service
        indent: Indentation width

    Returns:
        Pretty-printed JSON text

    Raises:
        ResultFormatError: If the text is not valid JSON
    """
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ResultFormatError(f"Model output is not valid JSON: {e}") from e
    return json.dumps(parsed, indent=indent, ensure_ascii=False)

