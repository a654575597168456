from __future__ import annotations

import os
import sys

import pytest


PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# RFC 4226 / RFC 6238 test secrets (ASCII)
RFC_SECRET_SHA1 = "12345678901234567890"
RFC_SECRET_SHA256 = "12345678901234567890123456789012"
RFC_SECRET_SHA512 = "1234567890123456789012345678901234567890123456789012345678901234"


def fixed_clock(seconds: float):
    """Clock stub returning a constant unix time."""
    return lambda: seconds


@pytest.fixture
def rfc_secret() -> str:
    return RFC_SECRET_SHA1
