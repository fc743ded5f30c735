"""
Tenant-scoped credential checks and token issuance.

Emails are only unique inside a tenant, so Django's ``authenticate()``
(which looks users up by username) is not used; the user is looked up
in the tenant and the password is checked directly.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.utils import timezone
from rest_framework.authtoken.models import Token
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from records.models import Tenant, User
from records.repositories.users import UserRepository

logger = logging.getLogger(__name__)


def authenticate_in_tenant(tenant: Tenant, email: str, password: str, using: Optional[str] = None) -> Optional[User]:
    user = UserRepository(using).find_in_tenant(tenant, email)
    if user is None:
        User().set_password(password)
        return None
    if not user.check_password(password):
        return None
    if user.status != 'active' or not user.is_active:
        logger.info("Refused login for %s user %s", user.status, user.pk)
        return None
    return user


def record_login(user: User, ip: Optional[str]) -> None:
    user.last_login_at = timezone.now()
    user.last_login_ip = (ip or '')[:45] or None
    user.save(update_fields=['last_login_at', 'last_login_ip', 'updated_at'])


def issue_tokens(user: User) -> dict:
    token, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    refresh['tenant_id'] = user.tenant_id
    return {
        'token': token.key,
        'jwt': {'access': str(refresh.access_token), 'refresh': str(refresh)},
    }


def revoke_tokens(user: User, refresh: Optional[str] = None) -> int:
    """Sign ``user`` out: drop the DRF token and blacklist refresh tokens.

    With ``refresh`` only that token is blacklisted, and it must belong to
    ``user``; otherwise every outstanding refresh token of the user is.
    Returns the number of refresh tokens blacklisted.
    """
    token = None
    if refresh:
        token = RefreshToken(refresh)
        if str(token.get('user_id')) != str(user.pk):
            raise TokenError('Token does not belong to this user')

    Token.objects.filter(user=user).delete()
    if token is not None:
        token.blacklist()
        count = 1
    else:
        count = 0
        for outstanding in OutstandingToken.objects.filter(user=user):
            _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
            count += int(created)
    logger.info("Revoked %d refresh token(s) for user %s", count, user.pk)
    return count
