from __future__ import annotations

from records.models import Tenant, User

from .base import Repository


class UserRepository(Repository[User]):
    model = User

    def create(self, *, email: str, password: str | None = None, tenant: Tenant | None = None, **fields) -> User:
        user = User(email=email.strip().lower(), tenant=tenant, **fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self.using)
        return user

    def find_in_tenant(self, tenant: Tenant, email: str) -> User | None:
        return self.queryset().filter(tenant=tenant, email__iexact=(email or '').strip()).first()

    def for_tenant(self, tenant: Tenant, role: str | None = None) -> list[User]:
        qs = self.queryset().filter(tenant=tenant)
        if role:
            qs = qs.filter(role=role)
        return list(qs.order_by('last_name', 'first_name'))
