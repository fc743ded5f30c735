from records.repositories.tenants import TenantRepository


class TenantMiddleware:
    """Attach the tenant named by ``x-tenant-id``, the subdomain or a custom domain.

    ``request.tenant`` is ``None`` when nothing matches; views decide
    whether a tenant is required.  ``request.tenant_header`` keeps the raw
    header value so views can tell "missing" from "unknown".
    """
    EXEMPT_PREFIXES = ('/static/', '/admin/', '/metrics', '/swagger', '/redoc', '/health')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        header = (request.META.get('HTTP_X_TENANT_ID') or '').strip()
        request.tenant_header = header or None
        request.tenant = None
        path = request.path or ''
        if not any(path.startswith(p) for p in self.EXEMPT_PREFIXES):
            host = request.META.get('HTTP_X_FORWARDED_HOST') or request.META.get('HTTP_HOST', '')
            request.tenant = TenantRepository().resolve(tenant_id=header or None, host=host)
        return self.get_response(request)
