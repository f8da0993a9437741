import base64
import secrets
import string
from typing import Union

DEFAULT_RANDOM_LENGTH = 20

_RANDOM_ALPHABET = string.ascii_letters + string.digits


def to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError("expected str or bytes")


def base64_encode(data: Union[str, bytes]) -> str:
    return base64.b64encode(to_bytes(data)).decode("ascii")


def base64_decode(text: Union[str, bytes]) -> bytes:
    # Line-wrapped input (64 or 60 column PEM style) is accepted; other
    # garbage raises binascii.Error.
    raw = to_bytes(text)
    return base64.b64decode(b"".join(raw.split()), validate=True)


def random_string(length: int = DEFAULT_RANDOM_LENGTH) -> str:
    """Return `length` characters drawn from [A-Za-z0-9] using the OS CSPRNG."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))
