"""Explicit per-entity repositories.

Build one per use with an optional database alias, e.g.
``PatientRepository(using=tenant_connection_alias(tenant))``.
"""
from .access_logs import AccessLogRepository
from .base import Repository
from .medical_histories import MedicalHistoryRepository
from .patient_qrs import PatientQrRepository
from .patients import PatientRepository
from .personnel import PersonnelRepository
from .rbac import RbacRepository
from .super_admins import SuperAdminRepository
from .taxonomy import TaxonomyRepository
from .tenants import TenantRepository, tenant_connection_alias
from .users import UserRepository
from .visit_types import TypeVisiteRepository
from .visits import VisitRepository

__all__ = [
    'AccessLogRepository',
    'MedicalHistoryRepository',
    'PatientQrRepository',
    'PatientRepository',
    'PersonnelRepository',
    'RbacRepository',
    'Repository',
    'SuperAdminRepository',
    'TaxonomyRepository',
    'TenantRepository',
    'TypeVisiteRepository',
    'UserRepository',
    'VisitRepository',
    'tenant_connection_alias',
]
