"""
Raw RSA in both directions, PKCS#1 v1.5 padded (OpenSSL's default).

public -> private is plain encryption. private -> public is the
"private_encrypt" primitive: block type 1 padding applied with the private
exponent, recovered on the other side through signature recovery.
"""

import math
import secrets

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding

from .errors import CryptoError
from .keys import PrivateKeyMaterial, PublicKeyMaterial

PKCS1_OVERHEAD = 11


def _require_public(material) -> PublicKeyMaterial:
    if not isinstance(material, PublicKeyMaterial):
        raise CryptoError("no public key loaded")
    return material


def _require_private(material) -> PrivateKeyMaterial:
    if not isinstance(material, PrivateKeyMaterial):
        raise CryptoError("no private key loaded")
    return material


def _modulus_bytes(key) -> int:
    return (key.key_size + 7) // 8


def max_payload_size(material) -> int:
    return _modulus_bytes(material.key) - PKCS1_OVERHEAD


def _check_payload(key, data: bytes) -> None:
    limit = _modulus_bytes(key) - PKCS1_OVERHEAD
    if len(data) > limit:
        raise CryptoError(f"data too large for key size: {len(data)} > {limit} bytes")


def encrypt_with_public(material, data: bytes) -> bytes:
    key = _require_public(material).key
    _check_payload(key, data)
    try:
        return key.encrypt(data, padding.PKCS1v15())
    except ValueError as e:
        raise CryptoError(str(e)) from e


def decrypt_with_private(material, data: bytes) -> bytes:
    key = _require_private(material).key
    try:
        return key.decrypt(data, padding.PKCS1v15())
    except ValueError as e:
        raise CryptoError(str(e)) from e


def _private_op(numbers, message: int) -> int:
    """m^d mod n through CRT on a blinded message."""
    n = numbers.public_numbers.n
    e = numbers.public_numbers.e
    while True:
        r = secrets.randbelow(n - 2) + 2
        if math.gcd(r, n) == 1:
            break
    blinded = (message * pow(r, e, n)) % n

    m1 = pow(blinded, numbers.dmp1, numbers.p)
    m2 = pow(blinded, numbers.dmq1, numbers.q)
    h = (numbers.iqmp * (m1 - m2)) % numbers.p
    signed = m2 + h * numbers.q

    return (signed * pow(r, -1, n)) % n


def encrypt_with_private(material, data: bytes) -> bytes:
    key = _require_private(material).key
    _check_payload(key, data)
    size = _modulus_bytes(key)
    block = b'\x00\x01' + b'\xff' * (size - 3 - len(data)) + b'\x00' + data
    message = int.from_bytes(block, 'big')
    crypted = _private_op(key.private_numbers(), message)
    return crypted.to_bytes(size, 'big')


def decrypt_with_public(material, data: bytes) -> bytes:
    key = _require_public(material).key
    try:
        return key.recover_data_from_signature(data, padding.PKCS1v15(), None)
    except (InvalidSignature, ValueError) as e:
        raise CryptoError(str(e) or "padding check failed") from e
