import os
import json
import logging
from typing import Optional

from .ssl_helper import SSL

ENVELOPE_SUFFIX = '.env.json'

log = logging.getLogger(__name__)

_SEALERS = {
    'public': SSL.crypt_with_public,
    'private': SSL.crypt_with_private,
}

_OPENERS = {
    'public': SSL.decrypt_with_private,
    'private': SSL.decrypt_with_public,
}


def _pick(table, direction: str):
    try:
        return table[direction]
    except KeyError:
        raise ValueError("Invalid direction: must be 'public' or 'private'.") from None


def _write_atomic(output_path: str, payload: bytes) -> None:
    tmp_path = f"{output_path}.tmp"
    try:
        with open(tmp_path, 'wb') as f_out:
            f_out.write(payload)
        os.replace(tmp_path, output_path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def seal_file(ssl: SSL, input_path: str, output_path: Optional[str] = None, *, direction: str = 'public') -> str:
    """Encrypt a file into a JSON envelope.

    direction='public' wraps the AES key with the public key (only the private
    key can open it); direction='private' wraps it with the private key.
    """
    seal = _pick(_SEALERS, direction)
    if output_path is None:
        output_path = f"{input_path}{ENVELOPE_SUFFIX}"
    if os.path.exists(output_path):
        raise FileExistsError(f"Output file '{output_path}' already exists")

    with open(input_path, 'rb') as f_in:
        envelope = seal(ssl, f_in.read())

    _write_atomic(output_path, json.dumps(envelope, indent=2).encode('utf-8'))
    log.info("Sealed '%s' with the %s key", input_path, direction)
    return output_path


def open_file(ssl: SSL, input_path: str, output_path: Optional[str] = None, *, direction: str = 'public') -> str:
    """Decrypt a JSON envelope written by seal_file with the same direction."""
    open_envelope = _pick(_OPENERS, direction)
    if output_path is None:
        if input_path.endswith(ENVELOPE_SUFFIX):
            output_path = input_path[:-len(ENVELOPE_SUFFIX)]
        else:
            output_path = f"{input_path}.dec"
    if os.path.exists(output_path):
        raise FileExistsError(f"Output file '{output_path}' already exists")

    with open(input_path, 'r', encoding='utf-8') as f_in:
        try:
            envelope = json.load(f_in)
        except json.JSONDecodeError as e:
            raise ValueError(f"Envelope file '{input_path}' is not valid JSON: {e}") from e
    if not isinstance(envelope, dict):
        raise ValueError(f"Envelope file '{input_path}' does not contain a JSON object")

    _write_atomic(output_path, open_envelope(ssl, envelope))
    log.info("Opened '%s' sealed with the %s key", input_path, direction)
    return output_path
