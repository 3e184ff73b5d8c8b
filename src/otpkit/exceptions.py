class OTPError(ValueError):
    """
    Base class for errors raised by otpkit.
    """


class MalformedSecret(OTPError):
    """
    The secret is not valid base32 text.
    """


class InvalidDigestLength(OTPError):
    """
    The keyed hash returned a digest of the wrong size.
    """

    def __init__(self, length: int, expected: int = 20) -> None:
        super().__init__("digest must be {} bytes, got {}".format(expected, length))
        self.length = length
        self.expected = expected


class InvalidCounter(OTPError):
    """
    The counter is negative, not an integer, or does not fit in 8 bytes.
    """


class UnsupportedType(OTPError):
    """
    The stored session type is neither ``totp`` nor ``hotp``.
    """


class InvalidURI(OTPError):
    """
    The registration URI cannot be turned into an OTP session.
    """
