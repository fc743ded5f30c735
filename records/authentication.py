"""
Custom authentication backend for token-based auth.

This module defines a subclass of Django REST framework's
``TokenAuthentication`` that reads ``Authorization: Bearer <key>``.
JWT access tokens travel under the same keyword, so a credential that
looks like a JWT is left for ``JWTAuthentication`` further down the
``DEFAULT_AUTHENTICATION_CLASSES`` list.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if len(auth) == 2 and auth[0].lower() == self.keyword.lower().encode() and auth[1].count(b'.') == 2:
            return None
        return super().authenticate(request)
