import hashlib
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from otpkit.config import (
    DEFAULT_DIGITS,
    DEFAULT_PERIOD,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_WINDOW,
    MAX_WINDOW,
    Algorithm,
    SecretOptions,
    TokenOptions,
    UnsupportedAlgorithmError,
)


def test_token_defaults():
    opts = TokenOptions.coerce(None)
    assert opts.period == DEFAULT_PERIOD == 30
    assert opts.digits == DEFAULT_DIGITS == 6
    assert opts.window == DEFAULT_WINDOW == 2
    assert opts.algorithm is Algorithm.SHA1
    assert opts.time is None
    assert opts.counter is None


def test_secret_defaults():
    opts = SecretOptions.coerce({})
    assert opts.secret_length == DEFAULT_SECRET_LENGTH == 64
    assert opts.algorithm is Algorithm.SHA1
    assert (opts.digits, opts.period) == (6, 30)


@pytest.mark.parametrize("name", ["sha256", "SHA256", " Sha256 ", "SHA-256", Algorithm.SHA256])
def test_algorithm_case_normalized(name):
    assert Algorithm.parse(name) is Algorithm.SHA256
    assert TokenOptions.coerce({"algorithm": name}).algorithm is Algorithm.SHA256


@pytest.mark.parametrize("name", ["MD5", "sha3-256", "", 1, ["SHA1"]])
def test_unknown_algorithm_rejected(name):
    with pytest.raises(UnsupportedAlgorithmError) as excinfo:
        TokenOptions.coerce({"algorithm": name})
    assert excinfo.value.algorithm == name
    with pytest.raises(UnsupportedAlgorithmError):
        SecretOptions.coerce({"algorithm": name})


def test_direct_construction_validates_algorithm():
    assert TokenOptions(algorithm="sha512").algorithm is Algorithm.SHA512
    with pytest.raises(ValidationError):
        TokenOptions(algorithm="whirlpool")


def test_algorithm_properties():
    assert Algorithm.SHA1.truncation_index == 19
    assert Algorithm.SHA256.truncation_index == 31
    assert Algorithm.SHA512.truncation_index == 63
    for algorithm in Algorithm:
        assert algorithm.truncation_index == algorithm.digestmod().digest_size - 1
    assert Algorithm.SHA256.digestmod is hashlib.sha256


@pytest.mark.parametrize("value", [None, "abc", 0, -5, 11, True, float("nan"), float("inf"), [6]])
def test_invalid_digits_fall_back(value):
    assert TokenOptions.coerce({"digits": value}).digits == 6


@pytest.mark.parametrize("value,expected", [(8, 8), ("8", 8), (10, 10), (1, 1)])
def test_valid_digits(value, expected):
    assert TokenOptions.coerce({"digits": value}).digits == expected


@pytest.mark.parametrize("value", [0, -30, "x", None])
def test_invalid_period_falls_back(value):
    assert TokenOptions.coerce({"period": value}).period == 30
    assert SecretOptions.coerce({"period": value}).period == 30


def test_window_zero_kept_negative_falls_back():
    assert TokenOptions.coerce({"window": 0}).window == 0
    assert TokenOptions.coerce({"window": 5}).window == 5
    assert TokenOptions.coerce({"window": -1}).window == DEFAULT_WINDOW


@pytest.mark.parametrize("value", [MAX_WINDOW + 1, 300000, 1e9, 10 ** 30])
def test_window_above_max_falls_back(value):
    assert TokenOptions.coerce({"window": value}).window == DEFAULT_WINDOW


def test_window_max_kept():
    assert TokenOptions.coerce({"window": MAX_WINDOW}).window == MAX_WINDOW == 10


def test_counter_range():
    assert TokenOptions.coerce({"counter": 0}).counter == 0
    assert TokenOptions.coerce({"counter": 2 ** 64 - 1}).counter == 2 ** 64 - 1
    assert TokenOptions.coerce({"counter": 2 ** 64}).counter is None
    assert TokenOptions.coerce({"counter": -1}).counter is None
    assert TokenOptions.coerce({"counter": "nope"}).counter is None


def test_time_accepts_seconds_and_datetime():
    assert TokenOptions.coerce({"time": 59}).time == 59.0
    assert TokenOptions.coerce({"time": "59.5"}).time == 59.5
    moment = datetime(2009, 2, 13, 23, 31, 30, tzinfo=timezone.utc)
    assert TokenOptions.coerce({"time": moment}).time == 1234567890.0


@pytest.mark.parametrize("value", [-1, "soon", float("inf"), False])
def test_invalid_time_means_now(value):
    opts = TokenOptions.coerce({"time": value})
    assert opts.time is None
    assert opts.timestamp(lambda: 123.0) == 123.0


def test_secret_length():
    assert SecretOptions.coerce({"secret_length": 20}).secret_length == 20
    assert SecretOptions.coerce({"secret_length": 0}).secret_length == 64
    assert SecretOptions.coerce({"secret_length": "big"}).secret_length == 64


def test_coerce_passthrough_and_extra_keys():
    opts = TokenOptions.coerce({"digits": 8})
    assert TokenOptions.coerce(opts) is opts
    assert TokenOptions.coerce({"secret": "x", "token": "123456"}) == TokenOptions()


def test_coerce_non_mapping_uses_defaults():
    assert TokenOptions.coerce(["digits", 8]) == TokenOptions()


def test_options_are_frozen():
    opts = TokenOptions()
    with pytest.raises(ValidationError):
        opts.digits = 8
