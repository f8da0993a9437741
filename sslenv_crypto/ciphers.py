"""
Symmetric layer: the cipher registry and raw AES encrypt/decrypt.

Two decrypt entry points exist:
- SymmetricCodec.decrypt(key, iv, data): key and IV are used as given.
- SymmetricCodec.decrypt_legacy(key, data): envelopes written before the IV
  was transported. The real key/IV pair is derived from `key` the way
  OpenSSL's EVP_BytesToKey does it (MD5, no salt, 2048 rounds).
"""

import os
import logging
from typing import Callable, Dict, Iterable, NamedTuple, Optional, Tuple

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend

from .errors import ConfigurationError, CryptoError

DEFAULT_CIPHER = 'aes-256-cbc'
LEGACY_KDF_ITERATIONS = 2048

log = logging.getLogger(__name__)


class CipherSpec(NamedTuple):
    name: str
    key_size: int
    iv_size: int
    mode: Callable[[bytes], modes.Mode]
    padded: bool


class CipherRegistry:
    """Name -> CipherSpec lookup. Pass a custom one to SSL to pin the supported set."""

    def __init__(self, specs: Iterable[CipherSpec] = ()):
        self._specs: Dict[str, CipherSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: CipherSpec) -> None:
        self._specs[spec.name.lower()] = spec

    def get(self, name: str) -> CipherSpec:
        spec = self._specs.get(str(name).lower())
        if spec is None:
            raise ConfigurationError(f"Unknown SSL cipher {name}")
        return spec

    def names(self):
        return sorted(self._specs)

    def __contains__(self, name) -> bool:
        return str(name).lower() in self._specs


def _default_specs():
    block_modes = {
        'cbc': (modes.CBC, True),
        'ctr': (modes.CTR, False),
    }
    for bits in (128, 192, 256):
        for mode_name, (mode, padded) in block_modes.items():
            yield CipherSpec(f"aes-{bits}-{mode_name}", bits // 8, 16, mode, padded)


DEFAULT_REGISTRY = CipherRegistry(_default_specs())


def bytes_to_key(secret: bytes, key_size: int, iv_size: int,
                 iterations: int = LEGACY_KDF_ITERATIONS) -> Tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5 and no salt."""
    derived = b''
    block = b''
    while len(derived) < key_size + iv_size:
        digest = hashes.Hash(hashes.MD5(), backend=default_backend())
        digest.update(block + secret)
        block = digest.finalize()
        for _ in range(iterations - 1):
            digest = hashes.Hash(hashes.MD5(), backend=default_backend())
            digest.update(block)
            block = digest.finalize()
        derived += block
    return derived[:key_size], derived[key_size:key_size + iv_size]


def _check_length(what: str, value: bytes, expected: int) -> None:
    if len(value) < expected:
        raise CryptoError(f"{what} length too short: expected {expected} bytes, got {len(value)}")
    if len(value) > expected:
        raise CryptoError(f"{what} length too long: expected {expected} bytes, got {len(value)}")


class SymmetricCodec:
    def __init__(self, cipher_name: str = DEFAULT_CIPHER, registry: Optional[CipherRegistry] = None):
        self.spec = (registry or DEFAULT_REGISTRY).get(cipher_name)
        log.debug("Using symmetric cipher %s", self.spec.name)

    def _cipher(self, key: bytes, iv: bytes) -> Cipher:
        _check_length('key', key, self.spec.key_size)
        _check_length('iv', iv, self.spec.iv_size)
        try:
            return Cipher(algorithms.AES(key), self.spec.mode(iv), backend=default_backend())
        except ValueError as e:
            raise CryptoError(str(e)) from e

    def encrypt(self, plaintext: bytes) -> Dict[str, bytes]:
        """Encrypt under a fresh random key and IV; returns raw {key, iv, data}."""
        key = os.urandom(self.spec.key_size)
        iv = os.urandom(self.spec.iv_size)
        return {'key': key, 'iv': iv, 'data': self._encrypt(key, iv, plaintext)}

    def _encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        if self.spec.padded:
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            plaintext = padder.update(plaintext) + padder.finalize()
        encryptor = self._cipher(key, iv).encryptor()
        return encryptor.update(plaintext) + encryptor.finalize()

    def decrypt(self, key: bytes, iv: bytes, data: bytes) -> bytes:
        decryptor = self._cipher(key, iv).decryptor()
        try:
            plaintext = decryptor.update(data) + decryptor.finalize()
            if self.spec.padded:
                unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
                plaintext = unpadder.update(plaintext) + unpadder.finalize()
        except ValueError as e:
            raise CryptoError(f"bad decrypt: {e}") from e
        return plaintext

    def decrypt_legacy(self, key: bytes, data: bytes) -> bytes:
        # The historical format set the key before deriving, so a key of the
        # wrong size is rejected before derivation happens.
        _check_length('key', key, self.spec.key_size)
        real_key, iv = bytes_to_key(key, self.spec.key_size, self.spec.iv_size)
        return self.decrypt(real_key, iv, data)

    def encrypt_legacy(self, key: bytes, plaintext: bytes) -> bytes:
        """Produce the pre-IV format; kept for interoperability tests and old peers."""
        _check_length('key', key, self.spec.key_size)
        real_key, iv = bytes_to_key(key, self.spec.key_size, self.spec.iv_size)
        return self._encrypt(real_key, iv, plaintext)
