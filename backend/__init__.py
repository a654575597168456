"""
BACKEND PACKAGE

Flask REST backend for the otpkit library.
"""

from .app import app, create_app

__all__ = ['app', 'create_app']
