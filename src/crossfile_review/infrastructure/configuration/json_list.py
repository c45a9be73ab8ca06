import json


def parse_json_list(value: object) -> list[str]:
    """Parse a JSON list from an env string; blank means empty."""
    if isinstance(value, str):
        if not value.strip():
            return []
        parsed = json.loads(value)
        if not isinstance(parsed, list):
            raise ValueError(f"Expected a JSON list, got {type(parsed).__name__}")
        return [str(item) for item in parsed]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []
