import pytest

from conftest import RFC_SECRET_SHA1
from otpkit.otp_cli import build_parser, main
from otpkit.otp_core import generate_token


def test_secret_command(capsys):
    assert main(["secret", "--name", "Acme", "--account", "bob", "--digits", "8"]) == 0
    out = capsys.readouterr().out
    assert "otpauth://totp/Acme:bob?secret=" in out
    assert "&digits=8&period=30" in out
    assert "https://chart.googleapis.com/chart?" in out


def test_token_command_counter(capsys):
    assert main(["token", "--secret", RFC_SECRET_SHA1, "--counter", "1"]) == 0
    assert "HOTP(counter=1): 287082" in capsys.readouterr().out


def test_token_command_time(capsys):
    assert main(["token", "--secret", RFC_SECRET_SHA1, "--time", "59", "--digits", "8"]) == 0
    assert "TOTP: 94287082  (valid ~ 1s)" in capsys.readouterr().out


def test_token_command_algorithm_lowercase(capsys):
    args = ["token", "--secret", "12345678901234567890123456789012",
            "--time", "59", "--digits", "8", "--algorithm", "sha256"]
    assert main(args) == 0
    assert "46119246" in capsys.readouterr().out


def test_token_command_empty_secret(capsys):
    assert main(["token", "--secret", ""]) == 2
    assert "[!]" in capsys.readouterr().out


def test_verify_command(capsys):
    token = generate_token("cli-secret", {"counter": 500})
    assert main(["verify", "--secret", "cli-secret", "--code", token, "--time", str(501 * 30)]) == 0
    assert "VALID" in capsys.readouterr().out
    assert main(["verify", "--secret", "cli-secret", "--code", token,
                 "--time", str(501 * 30), "--window", "0"]) == 1
    assert "INVALID" in capsys.readouterr().out


def test_unsupported_algorithm_is_argparse_error():
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["token", "--secret", "x", "--algorithm", "md5"])
    assert excinfo.value.code == 2


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "-h" in capsys.readouterr().out
