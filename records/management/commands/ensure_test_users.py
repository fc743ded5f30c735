# records/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand, CommandError

from records.models import Tenant
from records.repositories.super_admins import SuperAdminRepository
from records.repositories.users import UserRepository

PASSWORD = 'password123'

# (tenant subdomain or None, email, role)
TEST_SET = [
    ('dakar-health', 'fatou.seck@demo.com', 'midwife'),
    ('dakar-health', 'moussa.fall@demo.com', 'doctor'),
    ('dakar-health', 'aminata.diallo@demo.com', 'admin'),
    (None, 'superadmin@samacarnet.sn', 'admin'),
]


class Command(BaseCommand):
    help = "Ensure test users exist, are active and use password=password123 (idempotent)."

    def handle(self, *args, **opts):
        users = UserRepository()
        for subdomain, email, role in TEST_SET:
            tenant = None
            if subdomain:
                tenant = Tenant.objects.filter(subdomain=subdomain).first()
                if tenant is None:
                    raise CommandError(f"tenant {subdomain} does not exist; run seed_database first")
            u = users.queryset(include_deleted=True).filter(tenant=tenant, email__iexact=email).first()
            if u is None:
                u = users.create(email=email, password=PASSWORD, tenant=tenant, role=role)
            else:
                u.set_password(PASSWORD)
                u.role = role
                u.is_active = True
                u.status = 'active'
                u.deleted_at = None
                u.save(update_fields=['password', 'role', 'is_active', 'status', 'deleted_at'])
            if tenant is None:
                SuperAdminRepository().grant(u, 'full', notes='System super administrator')
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
