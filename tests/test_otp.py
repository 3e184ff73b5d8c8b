import pytest

from otpkit import base32
from otpkit.exceptions import InvalidCounter, InvalidDigestLength
from otpkit.otp import OTP, derive, int_to_bytestring
from otpkit.utils import hmac_sha1, strings_equal

from conftest import HELLO_SECRET, RFC_SECRET, fixed_digest

RFC4226_HOTP = [
    "755224",
    "287082",
    "359152",
    "969429",
    "338314",
    "254676",
    "287922",
    "162583",
    "399871",
    "520489",
]


class TestIntToBytestring:
    def test_big_endian(self):
        assert int_to_bytestring(0) == b"\x00" * 8
        assert int_to_bytestring(1) == b"\x00" * 7 + b"\x01"
        assert int_to_bytestring(0x0102030405060708) == bytes([1, 2, 3, 4, 5, 6, 7, 8])

    def test_max_counter(self):
        assert int_to_bytestring(2**64 - 1) == b"\xff" * 8

    @pytest.mark.parametrize("value", [-1, 2**64, 1.5, "1", True, None])
    def test_rejects_out_of_contract(self, value):
        with pytest.raises(InvalidCounter):
            int_to_bytestring(value)


class TestDerive:
    @pytest.mark.parametrize("counter, expected", list(enumerate(RFC4226_HOTP)))
    def test_rfc4226_vectors(self, counter, expected):
        assert derive(base32.decode(RFC_SECRET), counter) == expected

    def test_zero_padding(self):
        def hasher(key, message):
            return fixed_digest(42)

        assert derive(b"key", 0, hasher=hasher) == "000042"

    def test_sign_bit_is_masked(self):
        def hasher(key, message):
            return fixed_digest(0x80000000 | 1_000_007)

        assert derive(b"key", 0, hasher=hasher) == "000007"

    def test_offset_fifteen_reads_bytes_15_to_18(self):
        def hasher(key, message):
            return fixed_digest(123456, offset=15)

        assert derive(b"key", 0, hasher=hasher) == "123456"

    def test_hasher_receives_encoded_counter(self):
        seen = []

        def hasher(key, message):
            seen.append((key, message))
            return hmac_sha1(key, message)

        derive(b"key", 5, hasher=hasher)
        assert seen == [(b"key", int_to_bytestring(5))]

    @pytest.mark.parametrize("size", [0, 19, 32])
    def test_wrong_digest_size_fails_fast(self, size):
        def hasher(key, message):
            return b"\x00" * size

        with pytest.raises(InvalidDigestLength) as excinfo:
            derive(b"key", 0, hasher=hasher)
        assert excinfo.value.length == size

    def test_negative_counter(self):
        with pytest.raises(InvalidCounter):
            derive(b"key", -1)

    def test_always_six_digits(self):
        key = base32.decode(RFC_SECRET)
        for counter in range(200):
            token = derive(key, counter)
            assert len(token) == 6
            assert token.isdigit() and token.isascii()


def test_strings_equal():
    assert strings_equal("123456", "123456")
    assert not strings_equal("123456", "123457")
    assert not strings_equal("123456", "12345")
    # fullwidth digits normalize to ASCII
    assert strings_equal("１２３", "123")


def test_base_class_leaves_tokens_to_subclasses():
    otp = OTP(HELLO_SECRET)
    with pytest.raises(NotImplementedError):
        otp.calc_token(0)
    with pytest.raises(NotImplementedError):
        otp.verify_token("755224")
