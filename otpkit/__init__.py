"""
otpkit package
==============

TOTP generation and verification per RFC 6238 / RFC 4226.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP: code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits
- TOTP: HOTP with counter = floor(timestamp / period), period = 30s by default
- Dynamic truncation: 4 bytes from the digest at offset (last byte & 0x0F)
- Supported algorithms: SHA1 (default), SHA256, SHA512

──────────────────────────────────────────────
Quick start
──────────────────────────────────────────────
>>> from otpkit import generate_secret, generate_token, verify_token
>>> enrollment = generate_secret("MyService", "alice@example.com")
>>> enrollment["uri"]          # otpauth:// URI for authenticator apps
>>> token = generate_token(enrollment["secret"])
>>> verify_token(token, enrollment["secret"])
True

Keep ``enrollment["secret"]`` verbatim: it (not the raw random bytes) is the
HMAC key for every later call.
"""

from otpkit.config import Algorithm, SecretOptions, TokenOptions, UnsupportedAlgorithmError
from otpkit.otp_core import generate_token, time_remaining, verify_token
from otpkit.provisioning import generate_secret

__all__ = [
    "Algorithm",
    "SecretOptions",
    "TokenOptions",
    "UnsupportedAlgorithmError",
    "generate_secret",
    "generate_token",
    "time_remaining",
    "verify_token",
]
