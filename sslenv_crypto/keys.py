import os
import enum
import logging
from typing import NamedTuple, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.backends import default_backend

from .errors import CryptoError, InvalidKeyRoleError, KeyNotFoundError

log = logging.getLogger(__name__)


class KeyRole(enum.Enum):
    PUBLIC = 'public'
    PRIVATE = 'private'


class PublicKeyMaterial(NamedTuple):
    key: rsa.RSAPublicKey
    path: Optional[str] = None


class PrivateKeyMaterial(NamedTuple):
    key: rsa.RSAPrivateKey
    path: Optional[str] = None


class _Absent:
    """Placeholder for a role that was not configured."""

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NO_KEY'


NO_KEY = _Absent()

KeyMaterial = Union[PublicKeyMaterial, PrivateKeyMaterial, _Absent]


def _coerce_role(role) -> KeyRole:
    if isinstance(role, KeyRole):
        return role
    try:
        return KeyRole(str(role).lstrip(':').lower())
    except ValueError:
        raise InvalidKeyRoleError("Can only load :public or :private keys") from None


def _load_public(key_data: bytes) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_pem_public_key(key_data, backend=default_backend())
    except (ValueError, UnsupportedAlgorithm) as e:
        raise CryptoError(f"File does not contain a valid RSA public key: {e}") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise CryptoError("File does not contain a valid RSA public key.")
    return key


def _load_private(key_data: bytes, passphrase: Optional[Union[str, bytes]]) -> rsa.RSAPrivateKey:
    if isinstance(passphrase, str):
        passphrase = passphrase.encode('utf-8')
    try:
        key = serialization.load_pem_private_key(key_data, password=passphrase or None, backend=default_backend())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        # TypeError covers a missing or superfluous passphrase.
        raise CryptoError(f"File does not contain a valid RSA private key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise CryptoError("File does not contain a valid RSA private key.")
    return key


def read_key(role, path: Optional[str] = None, passphrase: Optional[Union[str, bytes]] = None):
    """Load a PEM RSA key for `role` from `path`.

    Returns None when no path is given. Raises KeyNotFoundError for a missing
    file, InvalidKeyRoleError for an unknown role and CryptoError when the
    file cannot be parsed as the requested key type.
    """
    if not path:
        return None

    if not os.path.exists(path):
        raise KeyNotFoundError(f"Could not find key {path}")

    role = _coerce_role(role)

    with open(path, 'rb') as key_file:
        key_data = key_file.read()

    log.debug("Loading %s key from %s", role.value, path)
    if role is KeyRole.PUBLIC:
        return PublicKeyMaterial(_load_public(key_data), path)
    return PrivateKeyMaterial(_load_private(key_data, passphrase), path)
