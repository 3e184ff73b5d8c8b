import logging
from typing import Any, Dict, Mapping
from urllib.parse import parse_qsl, unquote, urlparse

from . import base32 as base32
from .exceptions import InvalidCounter as InvalidCounter
from .exceptions import InvalidDigestLength as InvalidDigestLength
from .exceptions import InvalidURI as InvalidURI
from .exceptions import MalformedSecret as MalformedSecret
from .exceptions import OTPError as OTPError
from .exceptions import UnsupportedType as UnsupportedType
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import derive as derive
from .otp import int_to_bytestring as int_to_bytestring
from .provisioning import new_key as new_key
from .provisioning import random_base32 as random_base32
from .totp import TOTP as TOTP

__version__ = "0.3.1"

logger = logging.getLogger(__name__)


def parse_uri(uri: str, **kwargs: Any) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :param kwargs: passed through to the session constructor, e.g. ``clock``
    :returns: OTP object
    :raises InvalidURI: if the URI is not a supported otpauth URI
    :raises MalformedSecret: if the secret parameter is not valid base32
    """
    secret = None
    otp_data: Dict[str, Any] = {}

    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise InvalidURI("Not an otpauth URI")

    # Only a literal ":" separates the issuer; an encoded one belongs to the account
    accountinfo_parts = [unquote(part) for part in parsed_uri.path[1:].split(":", 1)]
    if len(accountinfo_parts) == 1:
        otp_data["name"] = accountinfo_parts[0]
    else:
        otp_data["issuer"] = accountinfo_parts[0]
        otp_data["name"] = accountinfo_parts[1]

    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if "issuer" in otp_data and otp_data["issuer"] != value:
                raise InvalidURI("If issuer is specified in both label and parameters, it should be equal.")
            otp_data["issuer"] = value
        elif key == "algorithm":
            if value.upper() != "SHA1":
                raise InvalidURI("Invalid value for algorithm, only SHA1 is supported")
        elif key == "digits":
            if value != "6":
                raise InvalidURI("Digits may only be 6")
        elif key == "period":
            otp_data["interval"] = _parse_int(key, value)
        elif key == "counter":
            otp_data["initial_count"] = _parse_int(key, value)
        else:
            logger.debug("Ignoring otpauth parameter %r", key)

    if not secret:
        raise InvalidURI("No secret found in URI")

    otp_data.update(kwargs)
    if parsed_uri.netloc == "totp":
        otp_data.pop("initial_count", None)
        return TOTP(secret, **otp_data)
    elif parsed_uri.netloc == "hotp":
        otp_data.pop("interval", None)
        return HOTP(secret, **otp_data)
    raise InvalidURI("Not a supported OTP type")


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise InvalidURI("{} must be an integer, got {!r}".format(key, value)) from e


def from_dict(data: Mapping[str, Any], **kwargs: Any) -> OTP:
    """
    Restores a session from the mapping produced by ``OTP.to_dict()``.

    :param data: ``{"type": "totp" | "hotp", "secret": ..., "counter": ...}``
    :param kwargs: passed through to the session constructor
    """
    otp_type = data.get("type")
    secret = data.get("secret")
    if not secret:
        raise MalformedSecret("secret must not be empty")

    if otp_type == "totp":
        if "interval" in data:
            kwargs.setdefault("interval", data["interval"])
        return TOTP(secret, **kwargs)
    elif otp_type == "hotp":
        return HOTP(secret, initial_count=data.get("counter", 0), **kwargs)
    raise UnsupportedType("Not a supported OTP type: {!r}".format(otp_type))
