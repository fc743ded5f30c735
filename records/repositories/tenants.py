from __future__ import annotations

import logging

from django.db import connections

from records.codecs import decode_tenant_settings, encode_tenant_settings
from records.models import Tenant

from .base import Repository

logger = logging.getLogger(__name__)

# Host labels that never name a tenant.
RESERVED_SUBDOMAINS = frozenset({'www', 'api', 'app', 'admin'})


class TenantRepository(Repository[Tenant]):
    model = Tenant

    def create(self, **fields) -> Tenant:
        if 'settings' in fields:
            fields['settings'] = encode_tenant_settings(fields['settings'])
        return super().create(**fields)

    def find_active(self, tenant_id) -> Tenant | None:
        try:
            pk = int(tenant_id)
        except (TypeError, ValueError):
            return None
        return self.queryset().filter(pk=pk, status='active').first()

    def find_by_subdomain(self, subdomain: str) -> Tenant | None:
        return self.queryset().filter(subdomain=subdomain, status='active').first()

    def find_by_domain(self, domain: str) -> Tenant | None:
        if not domain:
            return None
        return self.queryset().filter(domain=domain, status='active').first()

    def resolve(self, tenant_id=None, host: str | None = None) -> Tenant | None:
        """Resolve the tenant of a request.

        An explicit id wins; otherwise the first label of a host with at
        least three labels is tried as a subdomain, then the whole host
        as a custom domain.
        """
        if tenant_id not in (None, ''):
            return self.find_active(tenant_id)

        host = (host or '').split(':', 1)[0].lower()
        if not host:
            return None
        labels = host.split('.')
        if len(labels) >= 3 and labels[0] not in RESERVED_SUBDOMAINS:
            tenant = self.find_by_subdomain(labels[0])
            if tenant:
                return tenant
        return self.find_by_domain(host)

    def update_setting(self, tenant: Tenant, key: str, value) -> Tenant:
        settings = decode_tenant_settings(tenant.settings)
        settings[key] = value
        tenant.settings = encode_tenant_settings(settings)
        tenant.save(using=self.using, update_fields=['settings', 'updated_at'])
        return tenant


def tenant_connection_alias(tenant: Tenant) -> str:
    """Alias of the connection serving ``tenant``, registering it on first use.

    Tenants without dedicated database parameters share ``default``.
    """
    config = tenant.database_config()
    if config is None:
        return 'default'
    alias = f"tenant_{tenant.pk}"
    if alias not in connections.settings:
        base = dict(connections.settings['default'])
        base.update({k: v for k, v in config.items() if v})
        connections.settings[alias] = base
        logger.info("Registered database connection %s for tenant %s", alias, tenant.subdomain)
    return alias
