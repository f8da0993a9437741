import logging
from typing import Dict, Mapping, Optional, Union

from . import rsa_codec
from .ciphers import DEFAULT_CIPHER, CipherRegistry, SymmetricCodec
from .envelope import Envelope
from .errors import CryptoError
from .keys import NO_KEY, KeyRole, read_key
from .utils import DEFAULT_RANDOM_LENGTH, base64_decode, base64_encode, random_string, to_bytes

log = logging.getLogger(__name__)


class SSL:
    """Hybrid RSA + AES helper bound to one key pair and one symmetric cipher.

    crypt_with_public / decrypt_with_private give confidentiality: only the
    private key holder can read the result. crypt_with_private /
    decrypt_with_public let any public key holder read data that could only
    have been produced by the private key holder.

    Either key path may be omitted; operations needing that key then raise
    CryptoError.
    """

    def __init__(self, public_key_file: Optional[str] = None, private_key_file: Optional[str] = None,
                 passphrase: Optional[Union[str, bytes]] = None, ssl_cipher: Optional[str] = None,
                 registry: Optional[CipherRegistry] = None):
        self._aes = SymmetricCodec(ssl_cipher or DEFAULT_CIPHER, registry)

        self.public_key_file = public_key_file
        self.private_key_file = private_key_file

        self.public_key = read_key(KeyRole.PUBLIC, public_key_file) or NO_KEY
        self.private_key = read_key(KeyRole.PRIVATE, private_key_file, passphrase) or NO_KEY
        log.debug("SSL helper ready (cipher=%s, public=%s, private=%s)",
                  self.ssl_cipher, bool(self.public_key), bool(self.private_key))

    @property
    def ssl_cipher(self) -> str:
        # Fixed at construction; build a new SSL to change ciphers.
        return self._aes.spec.name

    read_key = staticmethod(read_key)

    # --- Utilities ---

    base64_encode = staticmethod(base64_encode)
    base64_decode = staticmethod(base64_decode)

    @staticmethod
    def random_string(length: int = DEFAULT_RANDOM_LENGTH) -> str:
        return random_string(length)

    # --- Raw AES ---

    def aes_encrypt(self, plaintext: Union[str, bytes]) -> Dict[str, bytes]:
        return self._aes.encrypt(to_bytes(plaintext))

    def aes_decrypt(self, key: bytes, *args: bytes) -> bytes:
        """aes_decrypt(key, iv, data) or, for pre-IV payloads, aes_decrypt(key, data)."""
        if len(args) == 2:
            iv, data = args
            return self._aes.decrypt(key, iv, data)
        if len(args) == 1:
            return self._aes.decrypt_legacy(key, args[0])
        raise TypeError("aes_decrypt() takes (key, iv, data) or (key, data)")

    # --- Raw RSA ---

    def rsa_encrypt_with_public(self, data: Union[str, bytes]) -> bytes:
        return rsa_codec.encrypt_with_public(self.public_key, to_bytes(data))

    def rsa_decrypt_with_private(self, data: bytes) -> bytes:
        return rsa_codec.decrypt_with_private(self.private_key, data)

    def rsa_encrypt_with_private(self, data: Union[str, bytes]) -> bytes:
        return rsa_codec.encrypt_with_private(self.private_key, to_bytes(data))

    def rsa_decrypt_with_public(self, data: bytes) -> bytes:
        return rsa_codec.decrypt_with_public(self.public_key, data)

    # --- Hybrid ---

    def _seal(self, plaintext, wrap) -> Dict[str, str]:
        crypted = self.aes_encrypt(plaintext)
        envelope = Envelope.seal(
            key=wrap(crypted['key']),
            iv=wrap(crypted['iv']),
            data=crypted['data'],
        )
        return envelope.to_dict()

    def _open(self, crypted: Mapping, unwrap) -> bytes:
        envelope = Envelope.from_mapping(crypted)
        try:
            key, iv, data = envelope.decoded()
        except ValueError as e:
            raise CryptoError(f"invalid base64 in crypted data: {e}") from e

        key = unwrap(key)
        if iv is None:
            log.debug("Decrypting envelope without iv using the legacy key derivation")
            return self._aes.decrypt_legacy(key, data)
        return self._aes.decrypt(key, unwrap(iv), data)

    def crypt_with_public(self, plaintext: Union[str, bytes]) -> Dict[str, str]:
        return self._seal(plaintext, self.rsa_encrypt_with_public)

    def decrypt_with_private(self, crypted: Mapping) -> bytes:
        return self._open(crypted, self.rsa_decrypt_with_private)

    def crypt_with_private(self, plaintext: Union[str, bytes]) -> Dict[str, str]:
        return self._seal(plaintext, self.rsa_encrypt_with_private)

    def decrypt_with_public(self, crypted: Mapping) -> bytes:
        return self._open(crypted, self.rsa_decrypt_with_public)

    encrypt_with_public = crypt_with_public
    encrypt_with_private = crypt_with_private
