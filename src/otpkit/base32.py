"""
RFC 4648 base32 codec for shared secrets.

Secrets are emitted without ``=`` padding, which is what the otpauth
scheme and most authenticator apps expect. Decoding accepts upper or
lower case and optional padding, but anything else is rejected rather
than repaired.
"""
import base64
import binascii
import re

from .exceptions import MalformedSecret

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_SECRET_CHARS = re.compile(r"[A-Z2-7]*")

# characters in the final 8-char group -> padding needed to complete it
_PADDING = {0: 0, 2: 6, 4: 4, 5: 3, 7: 1}


def encode(data: bytes) -> str:
    """
    Encode raw bytes as unpadded, upper-case base32 text.
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode base32 text back into raw bytes.

    :param text: base32 secret, padded or not, any case
    :raises MalformedSecret: on characters outside ``A-Z2-7``, an impossible
        length, wrong padding, or non-zero trailing bits
    """
    if not isinstance(text, str):
        raise MalformedSecret("secret must be a str, not {}".format(type(text).__name__))
    # str.upper() maps some non-ASCII letters onto the alphabet
    if not text.isascii():
        raise MalformedSecret("secret contains characters outside the base32 alphabet")

    normalized = text.upper()
    stripped = normalized.rstrip("=")
    pad_count = len(normalized) - len(stripped)

    if not _SECRET_CHARS.fullmatch(stripped):
        raise MalformedSecret("secret contains characters outside the base32 alphabet")

    tail = len(stripped) % 8
    if tail not in _PADDING:
        raise MalformedSecret("secret has an invalid length ({} characters)".format(len(stripped)))
    if pad_count and pad_count != _PADDING[tail]:
        raise MalformedSecret("secret has invalid padding")

    try:
        raw = base64.b32decode(stripped + "=" * _PADDING[tail])
    except binascii.Error as e:
        raise MalformedSecret("secret is not valid base32") from e

    # b32decode drops leftover bits silently
    if encode(raw) != stripped:
        raise MalformedSecret("secret has non-zero trailing bits")
    return raw
