"""
HTTP tests for the records API.
"""

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from records.models import CrossTenantAccessLog, Permission, Role, User
from records.repositories import (
    PatientQrRepository,
    PatientRepository,
    RbacRepository,
    SuperAdminRepository,
    TenantRepository,
    UserRepository,
)


class RecordsAPITests(APITestCase):
    def setUp(self) -> None:
        self.tenant = TenantRepository().create(
            name='Centre de Santé Dakar', subdomain='dakar-health', email='admin@dakar-health.sn',
        )
        self.other_tenant = TenantRepository().create(
            name='Clinique Almadies', subdomain='almadies', email='contact@almadies-clinic.sn',
        )
        self.user = UserRepository().create(
            email='fatou.seck@demo.com', password='password123', tenant=self.tenant,
            first_name='Fatou', last_name='Seck', role='midwife',
        )
        self.login_url = reverse('login_view')
        self.profile_url = reverse('profile_view')

    def login(self, tenant_id, email='fatou.seck@demo.com', password='password123'):
        headers = {} if tenant_id is None else {'HTTP_X_TENANT_ID': str(tenant_id)}
        return self.client.post(self.login_url, {'email': email, 'password': password}, format='json', **headers)

    def test_health(self):
        resp = self.client.get(reverse('health'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        body = resp.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['message'], 'SamaCarnet API is running')
        self.assertIn('timestamp', body)

    def test_login_requires_tenant_header(self):
        resp = self.login(None)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data, {'success': False, 'message': 'Tenant ID is required'})

    def test_login_rejects_unknown_tenant(self):
        resp = self.login(999999)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['success'])

    def test_login_rejects_suspended_tenant(self):
        self.tenant.status = 'suspended'
        self.tenant.save()
        resp = self.login(self.tenant.pk)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_rejects_bad_credentials(self):
        self.assertEqual(self.login(self.tenant.pk, password='wrong').status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(
            self.login(self.tenant.pk, email='nobody@demo.com').status_code, status.HTTP_401_UNAUTHORIZED
        )

    def test_login_is_scoped_to_the_tenant(self):
        resp = self.login(self.other_tenant.pk)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_rejects_inactive_or_deleted_user(self):
        self.user.status = 'suspended'
        self.user.save()
        self.assertEqual(self.login(self.tenant.pk).status_code, status.HTTP_401_UNAUTHORIZED)
        self.user.status = 'active'
        self.user.save()
        UserRepository().soft_delete(self.user)
        self.assertEqual(self.login(self.tenant.pk).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_validates_body(self):
        resp = self.client.post(
            self.login_url, {'email': 'fatou.seck@demo.com'}, format='json', HTTP_X_TENANT_ID=str(self.tenant.pk),
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data['success'])
        self.assertIn('password', resp.data['errors'])

    def test_login_success(self):
        resp = self.login(self.tenant.pk, email='Fatou.Seck@demo.com')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data['success'])
        data = resp.data['data']
        self.assertTrue(data['token'])
        self.assertTrue(data['jwt']['access'])
        self.assertTrue(data['jwt']['refresh'])
        self.assertEqual(data['user'], {
            'id': self.user.pk,
            'email': 'fatou.seck@demo.com',
            'firstName': 'Fatou',
            'lastName': 'Seck',
            'role': 'midwife',
            'tenantId': self.tenant.pk,
            'isSuperAdmin': False,
        })
        user = User.objects.get(pk=self.user.pk)
        self.assertIsNotNone(user.last_login_at)
        self.assertEqual(user.last_login_ip, '127.0.0.1')

    def test_login_reports_super_admin(self):
        SuperAdminRepository().grant(self.user)
        resp = self.login(self.tenant.pk)
        self.assertTrue(resp.data['data']['user']['isSuperAdmin'])

    def test_profile_with_bearer_token(self):
        token = self.login(self.tenant.pk).data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}', HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.get(self.profile_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['user']['email'], 'fatou.seck@demo.com')

    def test_profile_with_jwt_access_token(self):
        access = self.login(self.tenant.pk).data['data']['jwt']['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}', HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.get(self.profile_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['user']['id'], self.user.pk)

    def test_profile_rejects_foreign_tenant_header(self):
        token = self.login(self.tenant.pk).data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}', HTTP_X_TENANT_ID=str(self.other_tenant.pk))
        resp = self.client.get(self.profile_url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data, {'success': False, 'message': 'Tenant mismatch'})

    def test_profile_requires_authentication(self):
        resp = self.client.get(self.profile_url, HTTP_X_TENANT_ID=str(self.tenant.pk))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['success'])

    def test_invalid_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token', HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.get(self.profile_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_issues_new_access_token(self):
        refresh = self.login(self.tenant.pk).data['data']['jwt']['refresh']
        resp = self.client.post(reverse('refresh_view'), {'refresh': refresh}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data['data']['access'])

    def test_refresh_rejects_garbage(self):
        resp = self.client.post(reverse('refresh_view'), {'refresh': 'nope'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['success'])

    def test_logout_revokes_api_token_and_refresh_token(self):
        data = self.login(self.tenant.pk).data['data']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['token']}", HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.post(reverse('logout_view'), {'refresh': data['jwt']['refresh']}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data'], {'blacklisted': 1})

        self.assertEqual(self.client.get(self.profile_url).status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.credentials()
        resp = self.client.post(reverse('refresh_view'), {'refresh': data['jwt']['refresh']}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_without_refresh_blacklists_every_outstanding_token(self):
        first = self.login(self.tenant.pk).data['data']['jwt']['refresh']
        access = self.login(self.tenant.pk).data['data']['jwt']['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}', HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.post(reverse('logout_view'), {}, format='json')
        self.assertEqual(resp.data['data'], {'blacklisted': 2})
        self.client.credentials()
        resp = self.client.post(reverse('refresh_view'), {'refresh': first}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_refuses_another_users_refresh_token(self):
        UserRepository().create(
            email='moussa.fall@demo.com', password='password123', tenant=self.tenant, role='doctor',
        )
        foreign = self.login(self.tenant.pk, email='moussa.fall@demo.com').data['data']['jwt']['refresh']
        token = self.login(self.tenant.pk).data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}', HTTP_X_TENANT_ID=str(self.tenant.pk))
        resp = self.client.post(reverse('logout_view'), {'refresh': foreign}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class QrScanAPITests(APITestCase):
    def setUp(self) -> None:
        self.tenant = TenantRepository().create(
            name='Centre de Santé Dakar', subdomain='dakar-health', email='admin@dakar-health.sn',
        )
        self.other_tenant = TenantRepository().create(
            name='Clinique Almadies', subdomain='almadies', email='contact@almadies-clinic.sn',
        )
        self.midwife = UserRepository().create(
            email='fatou.seck@demo.com', password='password123', tenant=self.tenant, role='midwife',
        )
        self.visitor = UserRepository().create(
            email='mariama.sy@almadies-clinic.sn', password='password123', tenant=self.other_tenant, role='doctor',
        )
        patient = PatientRepository().create(
            self.tenant, first_name='Khadija', last_name='Ba', date_of_birth='1994-03-12', gender='female',
        )
        self.qr = PatientQrRepository(renderer=lambda token: token).generate_for_patient(patient)
        self.scan_url = reverse('scan_qr_view')
        self.logs_url = reverse('access_logs_view')

    def authenticate(self, user):
        resp = self.client.post(
            reverse('login_view'), {'email': user.email, 'password': 'password123'},
            format='json', HTTP_X_TENANT_ID=str(user.tenant_id),
        )
        token = resp.data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}', HTTP_X_TENANT_ID=str(user.tenant_id))

    def test_scan_in_own_tenant(self):
        self.authenticate(self.midwife)
        resp = self.client.post(self.scan_url, {'qr_code': self.qr.qr_code}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['accessLevel'], 'full')
        self.assertEqual(resp.data['data']['patient']['firstName'], 'Khadija')

    def test_scan_unknown_code(self):
        self.authenticate(self.midwife)
        resp = self.client.post(self.scan_url, {'qr_code': 'not-a-code'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data, {'success': False, 'message': 'Invalid QR code'})

    def test_scan_from_another_tenant_without_clearance(self):
        self.authenticate(self.visitor)
        resp = self.client.post(self.scan_url, {'qr_code': self.qr.qr_code}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(CrossTenantAccessLog.objects.get().denial_reason, 'Insufficient clearance level')

    def test_scan_requires_medical_role(self):
        UserRepository().create(
            email='khadija.ba@demo.com', password='password123', tenant=self.tenant, role='patient',
        )
        self.authenticate(UserRepository().find_in_tenant(self.tenant, 'khadija.ba@demo.com'))
        resp = self.client.post(self.scan_url, {'qr_code': self.qr.qr_code}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(CrossTenantAccessLog.objects.count(), 0)

    def test_access_logs_require_audit_permission(self):
        self.authenticate(self.midwife)
        self.client.post(self.scan_url, {'qr_code': self.qr.qr_code}, format='json')
        self.assertEqual(self.client.get(self.logs_url).status_code, status.HTTP_403_FORBIDDEN)

        audit = Permission.objects.create(
            name='system.audit_logs', display_name="Consulter logs d'audit", module='system', action='read',
        )
        RbacRepository().grant_user_permission(self.midwife, audit, self.tenant)
        resp = self.client.get(self.logs_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        # own-tenant scans are not cross-tenant reads
        self.assertEqual(resp.data['data'], [])

    def test_access_logs_list_cross_tenant_reads(self):
        visiting = Role.objects.create(name='visiting_doctor', display_name='Médecin visiteur', level=2, is_medical=True)
        RbacRepository().assign_role(self.visitor, visiting, self.other_tenant)
        self.authenticate(self.visitor)
        self.assertEqual(
            self.client.post(self.scan_url, {'qr_code': self.qr.qr_code}, format='json').status_code,
            status.HTTP_200_OK,
        )

        admin = UserRepository().create(
            email='aminata.diallo@demo.com', password='password123', tenant=self.tenant, role='admin',
        )
        self.authenticate(admin)
        resp = self.client.get(self.logs_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        [entry] = resp.data['data']
        self.assertEqual(entry['accessLevel'], 'basic')
        self.assertEqual(entry['scannerTenantId'], self.other_tenant.pk)