"""
Authentication endpoints.

Login is tenant scoped: the ``x-tenant-id`` header names the tenant and
the email is looked up inside it, so the same address may exist in
several tenants.  A successful login returns a DRF token (sent back as
``Authorization: Bearer <token>``) together with a JWT pair.  Logout drops
the DRF token and blacklists refresh tokens.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import SimpleRateThrottle
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from records.permissions import IsTenantMember
from records.repositories.tenants import TenantRepository
from records.serializers.auth import LoginSerializer, UserSerializer
from records.services.auth import authenticate_in_tenant, issue_tokens, record_login, revoke_tokens

logger = logging.getLogger(__name__)


class LoginRateThrottle(SimpleRateThrottle):
    scope = 'login'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


def _failure(message, status):
    return Response({'success': False, 'message': message}, status=status)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    header = getattr(request, 'tenant_header', None) or request.headers.get('x-tenant-id')
    if not header:
        return _failure('Tenant ID is required', 400)

    tenant = getattr(request, 'tenant', None) or TenantRepository().find_active(header)
    if tenant is None or not tenant.is_active:
        logger.info("Login refused: unknown or inactive tenant %r", header)
        return _failure('Invalid tenant', 401)

    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    user = authenticate_in_tenant(tenant, vd['email'], vd['password'])
    if user is None:
        logger.info("Login failed for %s in tenant %s", vd['email'], tenant.pk)
        return _failure('Invalid credentials', 401)

    record_login(user, request.META.get('REMOTE_ADDR'))
    data = issue_tokens(user)
    data['user'] = UserSerializer(user).data
    return Response({'success': True, 'message': 'Login successful', 'data': data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsTenantMember])
def profile_view(request):
    return Response({'success': True, 'data': {'user': UserSerializer(request.user).data}})


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_view(request):
    """Exchange a JWT refresh token for a new access token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    return Response({'success': True, 'data': dict(s.validated_data)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTenantMember])
def logout_view(request):
    """Drop the caller's API token and blacklist their refresh tokens (all, or the one given)."""
    try:
        count = revoke_tokens(request.user, request.data.get('refresh'))
    except TokenError as e:
        return _failure(f'Invalid refresh token: {e}', 400)
    return Response({'success': True, 'message': 'Logged out successfully', 'data': {'blacklisted': count}})
