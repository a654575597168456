"""
provisioning.py — secret generation and otpauth:// / QR link formatting.

generate_secret() returns two encodings of the same key material:

- ``secret``: URL-safe base64 (no padding) of the random bytes. This text is
  what generate_token() / verify_token() expect, keep it verbatim.
- ``secret_b32``: RFC 4648 base32 (no padding) of the UTF-8 bytes of
  ``secret``, i.e. of the exact HMAC key. Authenticator apps import this one
  through the otpauth URI.
"""

import base64
import logging
import secrets
from typing import Any, Callable, Dict
from urllib.parse import quote

from otpkit.config import (
    DEFAULT_DIGITS,
    DEFAULT_NAME,
    DEFAULT_PERIOD,
    QR_CHART_URL,
    Algorithm,
    SecretOptions,
)

logger = logging.getLogger(__name__)

RandomBytes = Callable[[int], bytes]

# characters JavaScript's encodeURIComponent leaves alone
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode a URI component the way encodeURIComponent does."""
    return quote(value, safe=_COMPONENT_SAFE)


def base32_no_padding(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def format_otpauth_uri(
    secret_b32: str,
    name: str,
    account: str,
    algorithm: Algorithm = Algorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
) -> str:
    """
    Build the TOTP provisioning URI understood by Google Authenticator & co.

        otpauth://totp/{name}:{account}?secret=...&issuer={name}&algorithm=...&digits=...&period=...

    ``name`` and ``account`` are raw labels; they are percent-encoded here.
    """
    issuer = encode_component(name)
    label = f"{issuer}:{encode_component(account)}"
    return (
        f"otpauth://totp/{label}?secret={secret_b32}&issuer={issuer}"
        f"&algorithm={Algorithm.parse(algorithm).value}&digits={digits}&period={period}"
    )


def qr_chart_url(uri: str) -> str:
    """Link to an external chart service that renders ``uri`` as a QR code."""
    return QR_CHART_URL + encode_component(uri)


def generate_secret(
    name: Any = None,
    account: Any = None,
    options: Any = None,
    *,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> Dict[str, str]:
    """
    Create a new shared secret plus everything needed to enroll it.

    Arguments:
        name: issuer label, "App" when empty
        account: account label, "" when empty
        options: SecretOptions, a mapping (secret_length, algorithm, digits,
            period) or None
        random_bytes: CSPRNG, called once with ``secret_length``

    Returns:
        dict with keys ``secret``, ``secret_b32``, ``uri`` and ``qr``

    Raises:
        UnsupportedAlgorithmError: algorithm is not SHA1, SHA256 or SHA512
    """
    opts = SecretOptions.coerce(options)
    name = str(name) if name else DEFAULT_NAME
    account = str(account) if account else ""

    raw = random_bytes(opts.secret_length)
    secret = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    secret_b32 = base32_no_padding(secret.encode("utf-8"))

    uri = format_otpauth_uri(
        secret_b32, name, account,
        algorithm=opts.algorithm, digits=opts.digits, period=opts.period,
    )
    logger.debug(
        "Generated %d-byte secret %s... for %s:%s (%s, %d digits, %ds)",
        opts.secret_length, secret[:4], name, account,
        opts.algorithm.value, opts.digits, opts.period,
    )
    return {
        "secret": secret,
        "secret_b32": secret_b32,
        "uri": uri,
        "qr": qr_chart_url(uri),
    }
