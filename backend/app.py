"""
FLASK APP MAIN ENTRY POINT - OTP BACKEND SERVER
================================================

Sets up the Flask app, enables CORS and registers the OTP API blueprint.

MAIN FEATURES
- Flask web server (debug mode via OTP_DEBUG)
- CORS enabled for frontend integration
- Routes from backend/routes.py under /api
- Root endpoint listing the available API endpoints
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from backend.routes import otp_bp
from otpkit.config import DEFAULT_NAME


def create_app(config=None) -> Flask:
    """
    Build the Flask app.

    Config keys:
      OTP_DEFAULT_NAME: issuer label used when /api/generate_secret gets no name
    """
    app = Flask(__name__)
    app.config.from_mapping(OTP_DEFAULT_NAME=DEFAULT_NAME)
    if config:
        app.config.update(config)

    # Allow the frontend (other domain/port) to call the API
    CORS(app)

    app.register_blueprint(otp_bp)

    @app.route('/', methods=['GET'])
    def index():
        """API HOME - LIST ENDPOINTS"""
        return jsonify({
            "service": "otpkit",
            "endpoints": {
                "POST /api/generate_secret": "Create a secret, otpauth URI and QR link",
                "POST /api/token": "Current TOTP code for a secret",
                "POST /api/verify_token": "Verify a TOTP code",
            },
        })

    return app


app = create_app()


# START THE SERVER
# Only when executed directly (python -m backend.app), not on import
if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    app.run(
        debug=os.environ.get('OTP_DEBUG', '').lower() in ('1', 'true', 'yes'),
        host=os.environ.get('OTP_HOST', '127.0.0.1'),
        port=int(os.environ.get('OTP_PORT', '5000')),
    )
