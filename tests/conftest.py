import pytest

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sslenv_crypto import SSL

PASSPHRASE = "s3cret-passphrase"


def _write_pair(directory, prefix, passphrase=None):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    if passphrase:
        encryption = serialization.BestAvailableEncryption(passphrase.encode("utf-8"))
    else:
        encryption = serialization.NoEncryption()
    private_path = directory / f"{prefix}-private.pem"
    public_path = directory / f"{prefix}-public.pem"
    private_path.write_bytes(key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=encryption,
    ))
    public_path.write_bytes(key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ))
    return str(public_path), str(private_path)


@pytest.fixture
def passphrase():
    return PASSPHRASE


@pytest.fixture(scope="session")
def key_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("keys")


@pytest.fixture(scope="session")
def key_pair(key_dir):
    return _write_pair(key_dir, "test")


@pytest.fixture(scope="session")
def other_key_pair(key_dir):
    return _write_pair(key_dir, "other")


@pytest.fixture(scope="session")
def protected_key_pair(key_dir):
    return _write_pair(key_dir, "protected", PASSPHRASE)


@pytest.fixture
def ssl(key_pair):
    public_path, private_path = key_pair
    return SSL(public_path, private_path)
