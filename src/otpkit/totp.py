import datetime
import logging
import secrets
import time
from typing import Any, Callable, Dict, Optional, Union

from .exceptions import InvalidCounter
from .otp import OTP, Hasher
from .utils import hmac_sha1

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30

TimeLike = Union[int, float, datetime.datetime]


class TOTP(OTP):
    """
    Handler for time-based OTP counters.

    Instances carry no mutable state, so one can be shared freely
    between threads.
    """

    otp_type = "totp"

    def __init__(
        self,
        s: Optional[str] = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = DEFAULT_INTERVAL,
        clock: Callable[[], float] = time.time,
        hasher: Hasher = hmac_sha1,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        """
        :param s: secret in base32 format; generated when omitted
        :param name: account name
        :param issuer: issuer
        :param interval: the time step in seconds
        :param clock: returns the current Unix time
        :param hasher: keyed hash, expected to be HMAC-SHA1
        :param random_bytes: secure random source for a generated secret
        """
        if interval <= 0:
            raise ValueError("interval must be a positive number of seconds")
        self.interval = interval
        self.clock = clock
        super().__init__(s=s, name=name, issuer=issuer, hasher=hasher, random_bytes=random_bytes)

    def timecode(self, for_time: TimeLike) -> int:
        """
        Accepts either a Unix timestamp or a datetime, and returns the
        time step it falls in.
        """
        if isinstance(for_time, datetime.datetime):
            for_time = for_time.timestamp()
        if for_time < 0:
            raise InvalidCounter("time must be non-negative")
        return int(for_time // self.interval)

    def calc_token(self, unix_time: TimeLike) -> str:
        """
        Generates the OTP for the step containing ``unix_time``.
        """
        return self.generate_otp(self.timecode(unix_time))

    at = calc_token

    def now(self) -> str:
        """
        Generate the current time OTP
        """
        return self.calc_token(self.clock())

    def remaining(self, for_time: Optional[TimeLike] = None) -> float:
        """
        Seconds left before the step containing ``for_time`` (default: now) ends.
        """
        if for_time is None:
            for_time = self.clock()
        if isinstance(for_time, datetime.datetime):
            for_time = for_time.timestamp()
        return self.interval - (for_time % self.interval)

    def verify_token(  # type: ignore[override]
        self,
        token: str,
        unix_time: Optional[TimeLike] = None,
        window: int = 0,
    ) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param token: the OTP to check against
        :param unix_time: time to check against, defaults to the clock
        :param window: number of steps either side of the current one to
            also accept, for clock drift; 0 means the exact step only
        """
        if window < 0:
            raise ValueError("window must be non-negative")
        if unix_time is None:
            unix_time = self.clock()

        step = self.timecode(unix_time)
        for counter in range(max(step - window, 0), step + window + 1):
            if self._matches(token, counter):
                logger.debug("TOTP verified at step offset %d", counter - step)
                return True

        logger.debug("TOTP verification failed at step %d", step)
        return False

    def _uri_args(self) -> Dict[str, Any]:
        return {"period": self.interval}

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.interval != DEFAULT_INTERVAL:
            data["interval"] = self.interval
        return data
