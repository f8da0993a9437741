"""
Hybrid RSA+AES envelope encryption.

High-level API:
- SSL(public_key_file=None, private_key_file=None, passphrase=None, ssl_cipher='aes-256-cbc')
- SSL.crypt_with_public(data) -> {'key', 'iv', 'data'}   (opened by decrypt_with_private)
- SSL.crypt_with_private(data) -> {'key', 'iv', 'data'}  (opened by decrypt_with_public)
- seal_file(ssl, input_path, output_path=None, direction='public') -> output_path
- open_file(ssl, input_path, output_path=None, direction='public') -> output_path

Exceptions are raised on errors instead of printing.
"""

from .ciphers import (
    DEFAULT_CIPHER,
    DEFAULT_REGISTRY,
    CipherRegistry,
    CipherSpec,
    SymmetricCodec,
)
from .envelope import Envelope
from .errors import (
    ConfigurationError,
    CryptoError,
    InvalidKeyRoleError,
    KeyNotFoundError,
    MissingFieldError,
    SSLError,
)
from .files import open_file, seal_file
from .keys import NO_KEY, KeyRole, PrivateKeyMaterial, PublicKeyMaterial, read_key
from .ssl_helper import SSL
from .utils import base64_decode, base64_encode, random_string

__all__ = [
    "SSL",
    "seal_file",
    "open_file",
    "read_key",
    "KeyRole",
    "PublicKeyMaterial",
    "PrivateKeyMaterial",
    "NO_KEY",
    "Envelope",
    "CipherRegistry",
    "CipherSpec",
    "SymmetricCodec",
    "DEFAULT_CIPHER",
    "DEFAULT_REGISTRY",
    "base64_encode",
    "base64_decode",
    "random_string",
    "SSLError",
    "ConfigurationError",
    "CryptoError",
    "InvalidKeyRoleError",
    "KeyNotFoundError",
    "MissingFieldError",
]
