from ninja.security import HttpBearer
from django.http import HttpRequest
from django.contrib.auth.models import User
from typing import Optional

from .jwt_auth import decode_access_token


class MixedAuth(HttpBearer):
    """Authentication that supports both JWT (Bearer token) and session-based auth"""

    def __call__(self, request: HttpRequest) -> Optional[User]:
        # HttpBearer only calls authenticate() when a Bearer header is present
        user = super().__call__(request)
        if user:
            return user

        # Fall back to session-based authentication
        if request.user.is_authenticated:
            return request.user

        return None

    def authenticate(self, request: HttpRequest, token: str) -> Optional[User]:
        return decode_access_token(token)


# Global instance
mixed_auth = MixedAuth()
