"""Level data parsing utilities."""

from typing import List

from pydantic import ValidationError

from .models import InvalidLevelData, LevelDataRoot, LevelRecord


def parse_levels(text: str) -> List[LevelRecord]:
    """
    Decode a level data document of the form {"data": [level, ...]}.

    Raises:
        InvalidLevelData: If the text is not valid level JSON or holds no levels
    """
    if not text.strip():
        raise InvalidLevelData("Level data is empty")

    try:
        root = LevelDataRoot.model_validate_json(text)
    except ValidationError as e:
        raise InvalidLevelData(f"Failed to parse level data: {e}") from e

    if not root.data:
        raise InvalidLevelData("Level data contains no levels")
    return root.data

