import pytest

# RFC 4226 / RFC 6238 SHA-1 test secret, b"12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

# b"Hello!\xde\xad\xbe\xef"
HELLO_SECRET = "JBSWY3DPEHPK3PXP"
HELLO_BYTES = b"Hello!\xde\xad\xbe\xef"


def fixed_digest(truncated: int, offset: int = 0) -> bytes:
    """Builds a 20 byte digest whose dynamic truncation yields ``truncated``."""
    digest = bytearray(20)
    digest[offset : offset + 4] = truncated.to_bytes(4, "big")
    digest[19] = (digest[19] & 0xF0) | offset
    return bytes(digest)


@pytest.fixture()
def rfc_secret():
    return RFC_SECRET


@pytest.fixture()
def hello_random():
    def random_bytes(n):
        return HELLO_BYTES[:n]

    return random_bytes
