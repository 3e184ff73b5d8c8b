import secrets
from typing import Any, Callable, Dict, List, Optional

from . import base32, provisioning
from .exceptions import InvalidCounter, InvalidDigestLength, MalformedSecret
from .utils import build_uri, hmac_sha1, strings_equal

DEFAULT_DIGITS = 6
DIGEST_SIZE = 20
MAX_COUNTER = 2**64 - 1

Hasher = Callable[[bytes, bytes], bytes]


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret

    :raises InvalidCounter: if ``i`` is not an int in ``0 .. 2**64 - 1``
    """
    if isinstance(i, bool) or not isinstance(i, int):
        raise InvalidCounter("counter must be an integer, not {}".format(type(i).__name__))
    if i < 0:
        raise InvalidCounter("counter must be non-negative")
    if i > MAX_COUNTER:
        raise InvalidCounter("counter does not fit in 8 bytes")

    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    # least significant byte was collected first
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))


def derive(secret: bytes, counter: int, hasher: Hasher = hmac_sha1) -> str:
    """
    Computes the 6 digit token for ``counter`` (RFC 4226 section 5.3).

    :param secret: the decoded shared secret
    :param counter: the moving factor, a time step or an event counter
    :param hasher: keyed hash, ``(key, message) -> 20 byte digest``
    :raises InvalidCounter: for a counter outside the 8 byte range
    :raises InvalidDigestLength: if ``hasher`` breaks its 20 byte contract
    """
    hmac_hash = bytearray(hasher(secret, int_to_bytestring(counter)))
    if len(hmac_hash) != DIGEST_SIZE:
        raise InvalidDigestLength(len(hmac_hash), DIGEST_SIZE)

    # offset is 0..15, so offset + 3 never passes index 18
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    return "{:0{width}d}".format(code % 10**DEFAULT_DIGITS, width=DEFAULT_DIGITS)


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the shared secret in both its base32 and raw forms. They are
    set together once, in the constructor, and exposed read-only.
    """

    otp_type = "otp"

    def __init__(
        self,
        s: Optional[str] = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        hasher: Hasher = hmac_sha1,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        """
        :param s: secret in base32 format; a new random one is generated when omitted
        :param name: account name
        :param issuer: issuer
        :param hasher: keyed hash used for every token
        :param random_bytes: secure random source used when ``s`` is omitted
        :raises MalformedSecret: if ``s`` is not valid, non-empty base32
        """
        if s is None:
            encoded, raw = provisioning.new_key(random_bytes=random_bytes)
        else:
            raw = base32.decode(s)
            if not raw:
                raise MalformedSecret("secret must not be empty")
            encoded = base32.encode(raw)

        self._secret = encoded
        self._byte_secret = raw
        self.digits = DEFAULT_DIGITS
        self.hasher = hasher
        self.name = name or "Secret"
        self.issuer = issuer

    @property
    def secret(self) -> str:
        return self._secret

    def byte_secret(self) -> bytes:
        return self._byte_secret

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        return derive(self._byte_secret, input, self.hasher)

    def calc_token(self, counter: Any) -> str:
        """Overridden by subclasses to map their moving factor to a token."""
        raise NotImplementedError()

    def verify_token(self, token: str, *args: Any, **kwargs: Any) -> bool:
        """Overridden by subclasses to check a presented token."""
        raise NotImplementedError()

    def _matches(self, token: Any, counter: int) -> bool:
        return strings_equal(str(token), self.generate_otp(counter))

    def _uri_args(self) -> Dict[str, Any]:
        return {}

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account, defaults to ``self.name``
        :param issuer_name: the name of the OTP issuer, defaults to ``self.issuer``
        :returns: provisioning URI
        """
        return build_uri(
            self.secret,
            name=name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            **self._uri_args(),
        )

    def get_url(self, issuer: str, account: str) -> str:
        return self.provisioning_uri(name=account, issuer_name=issuer)

    def _fields(self) -> List[str]:
        return [
            "type:" + self.otp_type,
            "secret:" + self.secret,
            "secret_decoded:" + self._byte_secret.hex(),
        ]

    def serialize(self) -> str:
        """
        Line oriented ``key:value`` dump for debugging. Use :meth:`to_dict`
        for anything that has to be read back.
        """
        return "\n".join(self._fields())

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.otp_type, "secret": self.secret}

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return "{}(name={!r}, issuer={!r})".format(self.__class__.__name__, self.name, self.issuer)
