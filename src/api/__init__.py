"""
Asset Link - Admin API

Structure:
- routes/     : Endpoint handlers
- schemas/    : Pydantic request/response models
- middleware/ : Auth and error handling
"""

from api.main import create_app

__all__ = ["create_app"]
