import json
from typing import List


class FormDecodeError(ValueError):
    pass


def parse_id_list(raw: str, field: str = "classes") -> List[int]:
    """Decode a JSON list of integer ids sent inside a form field, e.g. "[1, 2]".

    Duplicates are dropped, first occurrence wins.
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormDecodeError(f"Field '{field}' is not valid JSON: {e}")

    if not isinstance(value, list):
        raise FormDecodeError(f"Field '{field}' must be a JSON list of ids")

    ids = []
    for item in value:
        # bool is an int subclass, reject it explicitly
        if isinstance(item, bool) or not isinstance(item, int):
            raise FormDecodeError(f"Field '{field}' contains a non-integer id: {item!r}")
        if item not in ids:
            ids.append(item)
    return ids
