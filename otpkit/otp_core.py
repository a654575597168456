#!/usr/bin/env python3
"""
otp_core.py — core TOTP / HOTP library (RFC 6238 / RFC 4226).

Goals:
- Pure functions usable directly from the CLI and the REST backend.
- No argparse, no I/O, no persisted state.
- Bad input is reported by value: generate_token() returns None and
  verify_token() returns False, neither raises.

The secret is the text returned by provisioning.generate_secret(); its UTF-8
bytes are the HMAC key.
"""

import hmac
import logging
import struct
import time
from typing import Any, Callable, Optional

from otpkit.config import (
    DEFAULT_DIGITS,
    DEFAULT_PERIOD,
    MAX_COUNTER,
    Algorithm,
    TokenOptions,
    UnsupportedAlgorithmError,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Encode a counter as the 8-byte big-endian message RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes, algorithm: Algorithm = Algorithm.SHA1) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = low nibble of the digest byte at the algorithm's fixed index
    - take 4 bytes from offset, clear the MSB (0x7F) of the first one
    - return the big-endian 31-bit unsigned integer
    """
    offset = hmac_digest[algorithm.truncation_index] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def hotp(
    key: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    HOTP value for raw key bytes and a counter.

    Steps:
    1. message = 8-byte counter
    2. HMAC-<algorithm>(key, message)
    3. dynamic truncation -> dbc
    4. otp = dbc % 10^digits, zero-padded to exactly ``digits`` characters
    """
    digest = hmac.new(key, int_to_bytes(counter), algorithm.digestmod).digest()
    dbc = dynamic_truncate(digest, algorithm)
    return str(dbc % (10 ** digits)).zfill(digits)


def counter_at(timestamp: float, period: int = DEFAULT_PERIOD) -> int:
    """TOTP counter: floor(timestamp / period)."""
    return int(timestamp // period)


def _coerce_options(options: Any) -> Optional[TokenOptions]:
    try:
        return TokenOptions.coerce(options)
    except UnsupportedAlgorithmError as e:
        logger.warning("Are you using a valid algorithm? %s", e)
        return None


# --- Public API ------------------------------------------------------------
def generate_token(secret: Any, options: Any = None, *, clock: Clock = time.time) -> Optional[str]:
    """
    Generate the token for the current (or configured) time step.

    Arguments:
        secret: operational secret string (see provisioning.generate_secret)
        options: TokenOptions, a mapping with the same keys, or None.
            ``counter`` wins over ``time``/``period`` when given.
        clock: returns unix seconds, used when ``time`` is not given

    Returns:
        str: ``digits`` decimal characters
        None: secret missing / not a string, or unsupported algorithm
    """
    if not secret or not isinstance(secret, str):
        return None

    opts = _coerce_options(options)
    if opts is None:
        return None

    if opts.counter is not None:
        counter = opts.counter
    else:
        counter = counter_at(opts.timestamp(clock), opts.period)
        if counter > MAX_COUNTER:
            logger.warning("Time %s is out of range for a 64-bit counter", opts.time)
            return None

    return hotp(secret.encode("utf-8"), counter, opts.digits, opts.algorithm)


def verify_token(token: Any, secret: Any, options: Any = None, *, clock: Clock = time.time) -> bool:
    """
    Check a presented token against every step in [now - window, now + window].

    The current step comes from ``time`` (default clock()) and ``period``; any
    ``counter`` option is replaced by each candidate step. Other options are
    forwarded to generate_token(). Comparison is constant-time.

    Returns False for an empty / non-string token or secret, an unsupported
    algorithm, or when no step in the window matches.
    """
    if not token or not isinstance(token, str):
        return False
    if not secret or not isinstance(secret, str):
        return False

    opts = _coerce_options(options)
    if opts is None:
        return False

    current = counter_at(opts.timestamp(clock), opts.period)
    presented = token.encode("utf-8")
    for candidate in range(current - opts.window, current + opts.window + 1):
        if candidate < 0 or candidate > MAX_COUNTER:
            continue
        expected = generate_token(secret, opts.model_copy(update={"counter": candidate}))
        if hmac.compare_digest(expected.encode("ascii"), presented):
            logger.debug("Token matched step %d (offset %+d)", candidate, candidate - current)
            return True
    return False


def time_remaining(options: Any = None, *, clock: Clock = time.time) -> int:
    """Seconds until the code for the configured time rotates."""
    opts = TokenOptions.coerce(options)
    timestamp = opts.timestamp(clock)
    return int(opts.period - (timestamp % opts.period))
