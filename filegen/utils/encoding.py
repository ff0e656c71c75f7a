import os
import base64
import binascii


def _read_input(value: str) -> bytes:
    # An existing path means "use the file's content", anything else is literal text.
    if os.path.isfile(value):
        with open(value, "rb") as f:
            return f.read()
    return value.encode("utf-8")


def b64encode(value: str) -> str:
    return base64.b64encode(_read_input(value)).decode("ascii")


def b64decode(value: str) -> str:
    raw = _read_input(value).strip()
    try:
        decoded = base64.b64decode(raw, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 input: {e}") from e
    return decoded.decode("utf-8")
