import json


def _json_default(obj):
    """Render bytes as hex; everything else must already be JSON native."""
    if isinstance(obj, bytes):
        return obj.hex()
    raise TypeError(f"Not JSON serializable: {type(obj)}")


def canonicalize(data) -> str:
    """Deterministic JSON text (sorted keys, no whitespace)."""
    return json.dumps(
        data, sort_keys=True, separators=(",", ":"), default=_json_default
    )


def bytes_from_hex(value: str, size: int, name: str) -> bytes:
    """Decode a hex field, requiring exactly `size` bytes."""
    raw = bytes.fromhex(value)
    if len(raw) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(raw)}")
    return raw
