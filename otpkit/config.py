"""
config.py — defaults, the supported HMAC algorithms and per-call option models.

Every public otpkit operation accepts its options as ``None``, a plain mapping
(e.g. a JSON body) or one of the models below. The mapping is validated once,
at the boundary of the call:

- numeric values that are missing, not numbers or out of range fall back to
  their default instead of failing;
- the algorithm name is case-normalized and must be one of SHA1, SHA256,
  SHA512, anything else raises UnsupportedAlgorithmError.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# --- Defaults ---------------------------------------------------------------
DEFAULT_DIGITS = 6           # RFC 6238 recommends 6 digits
DEFAULT_PERIOD = 30          # TOTP step (seconds)
DEFAULT_WINDOW = 2           # +/- steps accepted by verify_token
DEFAULT_SECRET_LENGTH = 64   # random bytes per secret
DEFAULT_NAME = "App"         # issuer label when none is given
MAX_DIGITS = 10              # truncated value is 31 bits, i.e. at most 10 digits
MAX_WINDOW = 10              # verify_token runs 2 * window + 1 HMACs
MAX_COUNTER = 2 ** 64 - 1    # counter is packed as an unsigned 64-bit integer

QR_CHART_URL = "https://chart.googleapis.com/chart?chs=166x166&chld=L|0&cht=qr&chl="


class UnsupportedAlgorithmError(ValueError):
    """Raised when an algorithm name is not SHA1, SHA256 or SHA512."""

    def __init__(self, algorithm: Any):
        self.algorithm = algorithm
        super().__init__(
            f"Unsupported algorithm {algorithm!r}: only SHA1, SHA256 & SHA512 are supported"
        )


class Algorithm(str, Enum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digestmod(self) -> Callable:
        """hashlib constructor handed to hmac.new()."""
        return getattr(hashlib, self.value.lower())

    @property
    def truncation_index(self) -> int:
        """Index of the digest byte whose low nibble is the truncation offset."""
        return _TRUNCATION_INDEX[self]

    @classmethod
    def parse(cls, value: Any) -> "Algorithm":
        """
        Resolve a user supplied algorithm name.

        Accepts enum members and case-insensitive names, with or without a dash
        ("sha256", "SHA-256"). Raises UnsupportedAlgorithmError otherwise.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper().replace("-", ""))
            except ValueError:
                pass
        raise UnsupportedAlgorithmError(value)


# digest length - 1 (SHA1 -> 20 bytes, SHA256 -> 32 bytes, SHA512 -> 64 bytes)
_TRUNCATION_INDEX = {
    Algorithm.SHA1: 19,
    Algorithm.SHA256: 31,
    Algorithm.SHA512: 63,
}


# --- Coercion helpers -------------------------------------------------------
def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _positive_int(value: Any, default: int, upper: Optional[int] = None) -> int:
    number = _as_int(value)
    if number is None or number <= 0:
        return default
    if upper is not None and number > upper:
        return default
    return number


class _BaseOptions(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def coerce(cls, options: Any = None):
        """
        Build the options model from None, a mapping or an existing instance.

        Unlike direct construction, an unsupported algorithm surfaces as
        UnsupportedAlgorithmError instead of a pydantic ValidationError.
        """
        if isinstance(options, cls):
            return options
        data = dict(options) if isinstance(options, Mapping) else {}
        if data.get("algorithm") is None:
            data.pop("algorithm", None)
        else:
            data["algorithm"] = Algorithm.parse(data["algorithm"])
        # None means "not given" for every field
        data = {key: value for key, value in data.items() if value is not None}
        return cls.model_validate(data)


class TokenOptions(_BaseOptions):
    """
    Options for generate_token / verify_token.

    Attributes:
        period: time step in seconds (default 30).
        digits: token width (default 6, at most 10).
        algorithm: HMAC hash (default SHA1).
        time: unix seconds (or datetime) to compute the token for, default now.
        window: steps checked on each side of "now" when verifying (default 2, at most 10).
        counter: explicit HOTP counter, overrides time/period when generating.
    """

    period: int = DEFAULT_PERIOD
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = Algorithm.SHA1
    time: Optional[float] = None
    window: int = DEFAULT_WINDOW
    counter: Optional[int] = None

    @field_validator("period", mode="before")
    @classmethod
    def _period(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_PERIOD)

    @field_validator("digits", mode="before")
    @classmethod
    def _digits(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_DIGITS, upper=MAX_DIGITS)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _algorithm(cls, value: Any) -> Algorithm:
        return Algorithm.parse(value)

    @field_validator("time", mode="before")
    @classmethod
    def _time(cls, value: Any) -> Optional[float]:
        if isinstance(value, datetime):
            return value.timestamp()
        if isinstance(value, bool):
            return None
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(seconds) or seconds < 0:
            return None
        return seconds

    @field_validator("window", mode="before")
    @classmethod
    def _window(cls, value: Any) -> int:
        number = _as_int(value)
        if number is None or number < 0 or number > MAX_WINDOW:
            return DEFAULT_WINDOW
        return number

    @field_validator("counter", mode="before")
    @classmethod
    def _counter(cls, value: Any) -> Optional[int]:
        number = _as_int(value)
        if number is None or not 0 <= number <= MAX_COUNTER:
            return None
        return number

    def timestamp(self, clock: Callable[[], float]) -> float:
        """The configured time, or clock() when none was given."""
        return self.time if self.time is not None else clock()


class SecretOptions(_BaseOptions):
    """Options for generate_secret; digits/period/algorithm end up in the otpauth URI."""

    secret_length: int = DEFAULT_SECRET_LENGTH
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    @field_validator("secret_length", mode="before")
    @classmethod
    def _secret_length(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_SECRET_LENGTH)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _algorithm(cls, value: Any) -> Algorithm:
        return Algorithm.parse(value)

    @field_validator("digits", mode="before")
    @classmethod
    def _digits(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_DIGITS, upper=MAX_DIGITS)

    @field_validator("period", mode="before")
    @classmethod
    def _period(cls, value: Any) -> int:
        return _positive_int(value, DEFAULT_PERIOD)
