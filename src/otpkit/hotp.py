import logging
import secrets
import threading
from typing import Any, Callable, Dict, List, Optional

from .otp import MAX_COUNTER, OTP, Hasher, int_to_bytestring
from .utils import hmac_sha1

logger = logging.getLogger(__name__)


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    otp_type = "hotp"

    def __init__(
        self,
        s: Optional[str] = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
        hasher: Hasher = hmac_sha1,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        """
        :param s: secret in base32 format; generated when omitted
        :param name: account name
        :param issuer: issuer
        :param initial_count: starting HMAC counter value, defaults to 0
        :param hasher: keyed hash, expected to be HMAC-SHA1
        :param random_bytes: secure random source for a generated secret
        """
        # validates the range up front
        int_to_bytestring(initial_count)
        super().__init__(s=s, name=name, issuer=issuer, hasher=hasher, random_bytes=random_bytes)
        self.counter = initial_count
        self._lock = threading.Lock()

    def calc_token(self, counter: int) -> str:
        """
        Generates the OTP for the given count.

        :param counter: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(counter)

    at = calc_token

    def verify_token(self, token: str, window: int = 0) -> bool:  # type: ignore[override]
        """
        Verifies the OTP against the session counter and advances the
        counter past the matching value.

        :param token: the OTP to check against
        :param window: how many counter values past the current one to
            also accept, for resynchronization; 0 means the current one only
        :returns: True on a match, in which case ``self.counter`` moved on
        """
        if window < 0:
            raise ValueError("window must be non-negative")

        with self._lock:
            last = min(self.counter + window, MAX_COUNTER)
            for counter in range(self.counter, last + 1):
                if self._matches(token, counter):
                    if counter != self.counter:
                        logger.warning("HOTP resynchronized, skipped %d counter values", counter - self.counter)
                    self.counter = counter + 1
                    logger.debug("HOTP verified, counter advanced to %d", self.counter)
                    return True

        logger.debug("HOTP verification failed at counter %d", self.counter)
        return False

    def _uri_args(self) -> Dict[str, Any]:
        return {"initial_count": self.counter}

    def _fields(self) -> List[str]:
        return super()._fields() + ["counter:{}".format(self.counter)]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["counter"] = self.counter
        return data
