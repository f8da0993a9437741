"""Exception hierarchy for sslenv_crypto.

Every error also derives from the closest builtin so callers that only
know about ValueError / FileNotFoundError keep working.
"""


class SSLError(Exception):
    """Base class for all sslenv_crypto errors."""


class ConfigurationError(SSLError, ValueError):
    pass


class KeyNotFoundError(SSLError, FileNotFoundError):
    pass


class InvalidKeyRoleError(SSLError, ValueError):
    pass


class MissingFieldError(SSLError, ValueError):
    pass


class CryptoError(SSLError, ValueError):
    """Failure inside a cipher or key operation; carries the engine's message."""
