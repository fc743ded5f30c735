import pytest
from django.core.management import call_command

from records.models import (
    MedicalHistory,
    Patient,
    PatientQr,
    Permission,
    PersonnelCategory,
    PersonnelSubcategory,
    Role,
    Tenant,
    TypePersonnel,
    TypeVisite,
    User,
    UserRole,
    Visit,
    VisitHistory,
)
from records.repositories import RbacRepository, SuperAdminRepository, TaxonomyRepository
from records.seeders import run_all
from records.seeders.base import BaseSeeder
from records.seeders.demo import PeopleSeeder
from records.seeders.reference import TenantsSeeder

pytestmark = pytest.mark.django_db


def stub_renderer(token):
    return 'data:image/png;base64,' + token


def counts():
    return {
        model.__name__: model.objects.count()
        for model in (
            Tenant, PersonnelCategory, PersonnelSubcategory, TypePersonnel, TypeVisite,
            User, Patient, Visit, VisitHistory, MedicalHistory, PatientQr,
            Permission, Role, UserRole,
        )
    }


def test_full_seed_builds_demo_dataset():
    report = run_all(renderer=stub_renderer)
    assert report.failed == []
    assert report.record_errors == 0

    seeded = counts()
    assert seeded['Tenant'] == 4
    assert seeded['PersonnelCategory'] == 4
    assert seeded['PersonnelSubcategory'] == 10
    assert seeded['TypePersonnel'] == 11
    assert seeded['TypeVisite'] == 6
    assert seeded['Patient'] == 4
    assert seeded['Visit'] == 8
    # completed visits: created, updated, completed; upcoming visits: created
    assert seeded['VisitHistory'] == 16
    assert seeded['MedicalHistory'] == 12
    assert seeded['PatientQr'] == 4
    assert seeded['Permission'] == 33
    # one per personnel type plus super_admin
    assert seeded['Role'] == 12
    # five staff members and the super admin
    assert seeded['UserRole'] == 6

    demo = User.objects.get(email='fatou.seck@demo.com')
    assert demo.tenant.subdomain == 'dakar-health'
    assert demo.check_password('password123')

    root = User.objects.get(email='superadmin@samacarnet.sn')
    assert root.tenant_id is None
    assert SuperAdminRepository().for_user(root.pk).has_full_access

    assert TaxonomyRepository().full_path(
        PersonnelSubcategory.objects.get(name='obstetrique').pk
    ) == 'Médical > Obstétrique'


def test_seeding_twice_adds_nothing():
    run_all(renderer=stub_renderer)
    first = counts()
    report = run_all(renderer=stub_renderer)
    assert report.failed == []
    assert counts() == first


def test_failing_seeder_does_not_stop_the_run():
    class BrokenSeeder(BaseSeeder):
        name = 'broken'

        def run(self):
            raise RuntimeError('boom')

    report = run_all(seeders=(BrokenSeeder, TenantsSeeder))
    assert report.failed == ['broken']
    assert report.succeeded == ['tenants']
    assert Tenant.objects.count() == 4


def test_failing_records_are_skipped():
    # no taxonomy: every staff record fails, patients still get created
    report = run_all(seeders=(TenantsSeeder, PeopleSeeder))
    assert report.failed == []
    assert report.record_errors == 5
    assert Patient.objects.count() == 4
    assert not User.objects.filter(email='fatou.seck@demo.com').exists()


def test_seed_database_command():
    call_command('seed_database', '--only', 'tenants', 'taxonomy')
    assert Tenant.objects.count() == 4
    assert TypePersonnel.objects.count() == 11
    assert Patient.objects.count() == 0


def test_ensure_test_users_command():
    run_all(seeders=(TenantsSeeder,))
    call_command('ensure_test_users')
    call_command('ensure_test_users')
    fatou = User.objects.get(email='fatou.seck@demo.com')
    assert fatou.check_password('password123')
    assert fatou.role == 'midwife'
    root = User.objects.get(email='superadmin@samacarnet.sn')
    assert SuperAdminRepository().for_user(root.pk) is not None


def test_seeded_staff_hold_the_role_of_their_type():
    run_all(renderer=stub_renderer)
    rbac = RbacRepository()

    fatou = User.objects.get(email='fatou.seck@demo.com')
    assert [r.name for r in rbac.active_roles(fatou, fatou.tenant)] == ['sage_femme']
    granted = rbac.permission_names(fatou, fatou.tenant)
    assert 'visites.prescribe' in granted
    assert 'system.audit_logs' not in granted

    director = User.objects.get(email='aminata.diallo@demo.com')
    assert 'system.audit_logs' in rbac.permission_names(director, director.tenant)

    root = User.objects.get(email='superadmin@samacarnet.sn')
    assert rbac.clearance_level(root) == 5
    assert rbac.permission_names(root) == set(Permission.objects.values_list('name', flat=True))
