import logging
import secrets
from typing import Callable, Tuple

from . import base32

logger = logging.getLogger(__name__)

# 80 bits, the RFC 4226 minimum (128 recommended)
SECRET_BYTES = 10


def new_key(random_bytes: Callable[[int], bytes] = secrets.token_bytes, length: int = SECRET_BYTES) -> Tuple[str, bytes]:
    """
    Generates a fresh shared secret.

    :param random_bytes: cryptographically secure byte source, ``n -> bytes``
    :param length: number of random bytes, at least 10
    :returns: (base32 text, raw bytes) -- always created together
    """
    if length < SECRET_BYTES:
        raise ValueError("Secrets should be at least 80 bits")

    raw = bytes(random_bytes(length))
    if len(raw) != length:
        raise ValueError("random source returned {} bytes, expected {}".format(len(raw), length))

    logger.debug("Generated new %d-byte secret", length)
    return base32.encode(raw), raw


def random_base32(length: int = 16, random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """
    Returns a random base32 secret of ``length`` characters.

    The otpauth scheme does not use base32 padding, so ``length`` must be
    a multiple of 8 for the text to decode back without leftover bits.
    """
    if length < 16:
        raise ValueError("Secrets should be at least 80 bits")
    if length % 8:
        raise ValueError("length must be a multiple of 8")

    # 8 characters carry 5 bytes
    encoded, _ = new_key(random_bytes=random_bytes, length=length * 5 // 8)
    return encoded
