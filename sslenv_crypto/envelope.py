from typing import Dict, Mapping, NamedTuple, Optional

from .errors import CryptoError, MissingFieldError
from .utils import base64_decode, base64_encode


def _field(mapping: Mapping, name: str):
    # Accept both str and bytes keys; the YAML/JSON layer decides which.
    if name in mapping:
        return mapping[name]
    return mapping.get(name.encode('ascii'))


def _check_text(name: str, value) -> None:
    if not isinstance(value, (str, bytes)):
        raise CryptoError(f"Crypted data field {name} must be a base64 string, got {type(value).__name__}")


class Envelope(NamedTuple):
    """Wire form {key, iv, data}, every field base64.

    `iv` is None for envelopes written before the IV was transported.
    """
    key: str
    data: str
    iv: Optional[str] = None

    @property
    def has_iv(self) -> bool:
        return self.iv is not None

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> 'Envelope':
        key = _field(mapping, 'key')
        if key is None:
            raise MissingFieldError("Crypted data should include a key")
        data = _field(mapping, 'data')
        if data is None:
            raise MissingFieldError("Crypted data should include data")
        iv = _field(mapping, 'iv')
        for name, value in (('key', key), ('data', data), ('iv', iv)):
            if value is not None:
                _check_text(name, value)
        return cls(key=key, data=data, iv=iv)

    @classmethod
    def seal(cls, key: bytes, data: bytes, iv: Optional[bytes] = None) -> 'Envelope':
        return cls(
            key=base64_encode(key),
            data=base64_encode(data),
            iv=None if iv is None else base64_encode(iv),
        )

    def decoded(self):
        """Return (key, iv, data) as raw bytes; iv stays None for legacy envelopes."""
        iv = base64_decode(self.iv) if self.has_iv else None
        return base64_decode(self.key), iv, base64_decode(self.data)

    def to_dict(self) -> Dict[str, str]:
        result = {'key': self.key}
        if self.has_iv:
            result['iv'] = self.iv
        result['data'] = self.data
        return result
