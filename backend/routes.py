"""
OTP BACKEND API ROUTES - FLASK BLUEPRINT

All REST endpoints of the OTP backend. The backend is stateless: the client
keeps the secret returned by /api/generate_secret and sends it back with
every /api/token or /api/verify_token call.

USAGE:
- Server runs at: http://localhost:5000
- Call with curl, Postman or the browser
- Start with /api/generate_secret

EXAMPLES:
curl -X POST http://localhost:5000/api/generate_secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/token -H "Content-Type: application/json" -d '{"secret": "..."}'
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from otpkit.config import TokenOptions, UnsupportedAlgorithmError
from otpkit.otp_core import generate_token, time_remaining, verify_token
from otpkit.provisioning import generate_secret

logger = logging.getLogger(__name__)

otp_bp = Blueprint('otp', __name__, url_prefix='/api')


def _json_body():
    """Request JSON when it is an object, else None."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


@otp_bp.errorhandler(UnsupportedAlgorithmError)
def unsupported_algorithm(e):
    return jsonify({"error": str(e)}), 400


@otp_bp.route('/generate_secret', methods=['POST'])
def generate_secret_route():
    """
    CREATE A SECRET

      curl -X POST http://localhost:5000/api/generate_secret -H "Content-Type: application/json" -d "{}"

    With params:
      curl -X POST http://localhost:5000/api/generate_secret -H "Content-Type: application/json" \
           -d '{"name": "MyApp", "account": "alice@example.com", "digits": 8, "algorithm": "SHA256"}'

    Output:
      {"secret": "...", "secret_b32": "...", "uri": "otpauth://totp/...", "qr": "https://..."}
    """
    data = _json_body() or {}
    name = data.get('name') or current_app.config['OTP_DEFAULT_NAME']
    account = data.get('account', '')

    result = generate_secret(name, account, data)
    logger.info("Generated secret %s... for %s:%s", result["secret"][:4], name, account)
    return jsonify(result)


@otp_bp.route('/token', methods=['POST'])
def token_route():
    """
    GET THE CURRENT TOTP CODE

      curl -X POST http://localhost:5000/api/token -H "Content-Type: application/json" -d '{"secret": "..."}'

    Input (JSON body):
      {
        "secret": "...",        # REQUIRED - secret from /api/generate_secret
        "digits": 6,            # number of digits
        "period": 30,           # time step (seconds)
        "algorithm": "SHA1",    # SHA1 / SHA256 / SHA512
        "time": 1700000000,     # unix seconds, default now
        "counter": 5            # explicit counter (HOTP mode)
      }

    Output:
      {"code": "123456", "remaining": 12}
      400 when the time is past the 64-bit counter range
    """
    data = _json_body()
    if not data or not isinstance(data.get('secret'), str) or not data['secret']:
        return jsonify({"error": "Secret is required"}), 400

    opts = TokenOptions.coerce(data)
    code = generate_token(data['secret'], opts)
    if code is None:
        return jsonify({"error": "Time is out of range for a 64-bit counter"}), 400
    return jsonify({"code": code, "remaining": time_remaining(opts)})


@otp_bp.route('/verify_token', methods=['POST'])
def verify_token_route():
    """
    VERIFY A TOTP CODE

      curl -X POST http://localhost:5000/api/verify_token -H "Content-Type: application/json" \
           -d '{"token": "123456", "secret": "..."}'

    Input (JSON body):
      {
        "token": "123456",    # code to verify
        "secret": "...",      # secret from /api/generate_secret
        "window": 2,          # allowed drift, in steps, on each side of now (at most 10)
        "digits": 6, "period": 30, "algorithm": "SHA1", "time": 1700000000
      }

    Output:
      {"valid": true}  or  {"valid": false}
    """
    data = _json_body()
    if not data or 'token' not in data or 'secret' not in data:
        return jsonify({"error": "Token and secret are required"}), 400

    opts = TokenOptions.coerce(data)
    valid = verify_token(data['token'], data['secret'], opts)
    return jsonify({"valid": valid})
