#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper for the otpkit library (stateless).

Subcommands:
- secret : generate a new secret, print otpauth URI and QR link
- token  : print the TOTP code for a secret (now, a given time or a counter)
- verify : check a code against a secret, exit 0 if valid, 1 if not

Nothing is stored: the secret is passed on the command line every time.
"""

import argparse
import logging
import sys
from typing import List, Optional

from otpkit.config import (
    DEFAULT_DIGITS,
    DEFAULT_NAME,
    DEFAULT_PERIOD,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_WINDOW,
    Algorithm,
)
from otpkit.otp_core import generate_token, time_remaining, verify_token
from otpkit.provisioning import generate_secret

ALGORITHMS = [a.value for a in Algorithm]


def _token_options(args) -> dict:
    return {
        "algorithm": args.algorithm,
        "digits": args.digits,
        "period": args.period,
        "time": args.time,
        "counter": getattr(args, "counter", None),
        "window": getattr(args, "window", None),
    }


# --- CLI command handlers ---
def cmd_secret(args) -> int:
    result = generate_secret(
        args.name,
        args.account,
        {
            "secret_length": args.length,
            "algorithm": args.algorithm,
            "digits": args.digits,
            "period": args.period,
        },
    )
    print("[*] Secret (keep verbatim, used as HMAC key):")
    print("    ", result["secret"])
    print("[*] Base32 secret (for authenticator apps):")
    print("    ", result["secret_b32"])
    print("[*] otpauth URI:")
    print("    ", result["uri"])
    print("[*] QR code:")
    print("    ", result["qr"])
    return 0


def cmd_token(args) -> int:
    opts = _token_options(args)
    code = generate_token(args.secret, opts)
    if code is None:
        print("[!] Could not generate a token for this secret.")
        return 2
    if args.counter is not None:
        print(f"HOTP(counter={args.counter}): {code}")
    else:
        print(f"TOTP: {code}  (valid ~{time_remaining(opts):2d}s)")
    return 0


def cmd_verify(args) -> int:
    if verify_token(args.code, args.secret, _token_options(args)):
        print("[+] TOTP code is VALID")
        return 0
    print("[-] TOTP code is INVALID")
    return 1


def cmd_help(args) -> int:
    print("'otpkit -h' for help.")
    return 0


# --- Argparse builder ---
def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--algorithm", type=str.upper, choices=ALGORITHMS, default=Algorithm.SHA1.value,
                   help="HMAC algorithm")
    p.add_argument("--digits", type=int, default=DEFAULT_DIGITS, help="Number of OTP digits")
    p.add_argument("--period", type=int, default=DEFAULT_PERIOD, help="TOTP time step (seconds)")
    p.add_argument("--verbose", action="store_true", help="Verbose output")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="otpkit", description="TOTP secret / token / verification tool")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help, verbose=False)

    # secret
    ps = sub.add_parser("secret", help="Generate a secret and print otpauth URI + QR link")
    ps.add_argument("--name", default=DEFAULT_NAME, help="Issuer label for otpauth URI")
    ps.add_argument("--account", default="", help="Account label for otpauth URI")
    ps.add_argument("--length", type=int, default=DEFAULT_SECRET_LENGTH, help="Secret length in bytes")
    _add_common(ps)
    ps.set_defaults(func=cmd_secret)

    # token
    pt = sub.add_parser("token", help="Print the TOTP code for a secret")
    pt.add_argument("--secret", required=True, help="Secret as printed by 'otpkit secret'")
    pt.add_argument("--time", type=float, help="Unix time in seconds (default: now)")
    pt.add_argument("--counter", type=int, help="Explicit counter (HOTP mode)")
    _add_common(pt)
    pt.set_defaults(func=cmd_token)

    # verify
    pv = sub.add_parser("verify", help="Verify a TOTP code")
    pv.add_argument("--secret", required=True, help="Secret as printed by 'otpkit secret'")
    pv.add_argument("--code", required=True, help="OTP code to verify")
    pv.add_argument("--time", type=float, help="Unix time in seconds (default: now)")
    pv.add_argument("--window", type=int, default=DEFAULT_WINDOW, help="Allowed +/- step window")
    _add_common(pv)
    pv.set_defaults(func=cmd_verify)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
