import hashlib
import hmac
import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode


def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """
    RFC 2104 HMAC over SHA-1; the default keyed hash for every session.
    """
    return hmac.new(key, message, hashlib.sha1).digest()


def build_uri(
    secret: str,
    name: str,
    initial_count: Optional[int] = None,
    issuer: Optional[str] = None,
    period: Optional[int] = None,
) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    This can then be encoded in a QR Code and used to provision an
    authenticator app.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the base32 secret, unpadded
    :param name: name of the account; it becomes the URI label
    :param initial_count: current counter value, defaults to None.
        If none, the OTP type will be assumed as TOTP.
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param period: the number of seconds per TOTP step; only emitted
        when it differs from 30
    :returns: provisioning uri
    """
    # initial_count may be 0 as a valid param
    is_initial_count_present = initial_count is not None
    is_period_set = period is not None and period != 30

    otp_type = "hotp" if is_initial_count_present else "totp"
    base_uri = "otpauth://{0}/{1}?{2}"

    url_args: Dict[str, Union[int, str]] = {"secret": secret}

    # "@" is left alone so that e-mail style accounts stay readable
    label = quote(name, safe="@")
    if issuer is not None:
        url_args["issuer"] = issuer
    if is_initial_count_present:
        url_args["counter"] = initial_count  # type: ignore
    if is_period_set:
        url_args["period"] = period  # type: ignore

    return base_uri.format(otp_type, label, urlencode(url_args).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
