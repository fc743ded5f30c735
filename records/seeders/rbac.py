"""
Role based access control: the permission catalogue, one system role per
personnel type (plus ``super_admin``) with its default permissions, and
the role assignments of seeded staff.
"""
from __future__ import annotations

import logging

from records.models import Permission, Personnel, Role, TypePersonnel, User
from records.repositories.rbac import RbacRepository

from .base import BaseSeeder

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = 'super_admin'

# (name, display name, action, scope, min level, medical, sensitive, audited, supervised)
PERMISSIONS = [
    ('patients.create', 'Créer un patient', 'create', 'tenant', None, False, False, True, False),
    ('patients.read_own', 'Voir ses patients', 'read', 'own', None, True, False, False, False),
    ('patients.read_all', 'Voir tous les patients', 'read', 'tenant', 2, True, True, True, False),
    ('patients.update_own', 'Modifier ses patients', 'update', 'own', None, True, False, True, False),
    ('patients.update_all', 'Modifier tous patients', 'update', 'tenant', 3, True, True, True, True),
    ('patients.delete', 'Supprimer patient', 'delete', 'tenant', 4, True, True, True, True),
    ('patients.assign_doctor', 'Assigner médecin', 'assign', 'tenant', 2, True, False, True, False),
    ('visites.create_prenatal', 'Créer visite prénatale', 'create', 'own', 1, True, False, False, False),
    ('visites.create_postnatal', 'Créer visite postnatale', 'create', 'own', 1, True, False, False, False),
    ('visites.create_emergency', 'Créer visite urgence', 'create', 'tenant', 2, True, False, True, False),
    ('visites.read_own', 'Voir ses visites', 'read', 'own', None, True, False, False, False),
    ('visites.read_department', 'Voir visites du service', 'read', 'department', 3, True, True, False, False),
    ('visites.update_own', 'Modifier ses visites', 'update', 'own', None, True, False, True, False),
    ('visites.delete_own', 'Supprimer ses visites', 'delete', 'own', 2, True, True, True, True),
    ('visites.prescribe', 'Prescrire médicaments', 'prescribe', 'own', 1, True, True, True, False),
    ('visites.prescribe_controlled', 'Prescrire substances contrôlées', 'prescribe', 'own', 2, True, True, True, True),
    ('visites.validate_diagnosis', 'Valider diagnostic', 'validate', 'department', 3, True, True, True, False),
    ('vaccinations.create', 'Créer vaccination', 'create', 'own', 1, True, False, True, False),
    ('vaccinations.administer', 'Administrer vaccin', 'administer', 'own', 1, True, True, True, False),
    ('vaccinations.schedule', 'Programmer vaccination', 'schedule', 'tenant', 1, True, False, False, False),
    ('personnel.view_own_profile', 'Voir son profil', 'read', 'own', None, False, False, False, False),
    ('personnel.view_department', 'Voir personnel du service', 'read', 'department', 2, False, False, False, False),
    ('personnel.manage_schedules', 'Gérer les plannings', 'manage', 'department', 3, False, False, True, False),
    ('personnel.assign_roles', 'Assigner rôles', 'assign', 'tenant', 4, False, True, True, True),
    ('reports.view_own', 'Voir ses rapports', 'read', 'own', None, False, False, False, False),
    ('reports.view_department', 'Voir rapports du service', 'read', 'department', 3, False, True, True, False),
    ('reports.export_anonymous', 'Exporter données anonymes', 'export', 'tenant', 2, False, False, True, False),
    ('reports.export_identified', 'Exporter données nominatives', 'export', 'tenant', 4, False, True, True, True),
    ('emergency.access', 'Accès mode urgence', 'access', 'tenant', 1, True, True, True, False),
    ('emergency.override_restrictions', 'Contourner restrictions urgence', 'override', 'tenant', 2, True, True, True, True),
    ('system.manage_tenant', 'Gérer le tenant', 'manage', 'tenant', 4, False, True, True, True),
    ('system.manage_roles', 'Gérer les rôles', 'manage', 'tenant', 4, False, True, True, True),
    ('system.audit_logs', "Consulter logs d'audit", 'read', 'tenant', 4, False, True, True, False),
]

_JUNIOR_MIDWIFE = [
    'patients.read_own', 'patients.update_own', 'visites.create_prenatal', 'visites.read_own',
    'vaccinations.create', 'personnel.view_own_profile', 'emergency.access',
]
_MIDWIFE = _JUNIOR_MIDWIFE + [
    'patients.assign_doctor', 'visites.create_postnatal', 'visites.prescribe',
    'vaccinations.administer', 'reports.view_own',
]
_SENIOR_MIDWIFE = _MIDWIFE + [
    'patients.read_all', 'visites.read_department', 'visites.validate_diagnosis',
    'vaccinations.schedule', 'personnel.view_department', 'reports.view_department',
]
_NURSE = [
    'patients.read_own', 'visites.read_own', 'vaccinations.create', 'vaccinations.administer',
    'personnel.view_own_profile', 'emergency.access',
]

# role (personnel type) name -> default permissions; roles not listed get none
ROLE_PERMISSIONS = {
    'sage_femme_junior': _JUNIOR_MIDWIFE,
    'sage_femme': _MIDWIFE,
    'sage_femme_senior': _SENIOR_MIDWIFE,
    'gyneco_obstetricien': _SENIOR_MIDWIFE + [
        'patients.create', 'visites.create_emergency', 'visites.prescribe_controlled',
        'emergency.override_restrictions',
    ],
    'medecin_generaliste': [
        'patients.read_own', 'patients.update_own', 'visites.create_prenatal', 'visites.create_postnatal',
        'visites.read_own', 'visites.prescribe', 'visites.validate_diagnosis', 'vaccinations.create',
        'vaccinations.administer', 'personnel.view_own_profile', 'reports.view_own', 'emergency.access',
    ],
    'pediatre': _SENIOR_MIDWIFE + ['visites.prescribe_controlled'],
    'infirmier': _NURSE,
    'infirmier_senior': _NURSE + ['vaccinations.schedule', 'personnel.view_department'],
    'directeur_medical': _SENIOR_MIDWIFE + [
        'patients.create', 'patients.update_all', 'patients.delete', 'visites.create_emergency',
        'personnel.manage_schedules', 'personnel.assign_roles', 'reports.export_anonymous',
        'emergency.override_restrictions', 'system.manage_tenant', 'system.audit_logs',
    ],
}


class RbacSeeder(BaseSeeder):
    name = 'rbac'

    def _permissions(self) -> dict:
        permissions = {}
        for name, display, action, scope, min_level, medical, sensitive, audited, supervised in PERMISSIONS:
            permissions[name], created = Permission.objects.using(self.using).update_or_create(
                name=name,
                defaults={
                    'display_name': display, 'module': name.split('.')[0], 'action': action, 'scope': scope,
                    'min_level_required': min_level, 'is_medical': medical, 'is_sensitive': sensitive,
                    'requires_audit': audited, 'requires_supervision': supervised,
                    'is_system': name.startswith('system.'), 'is_active': True,
                },
            )
            self.created += int(created)
        return permissions

    def _role(self, name, **fields) -> Role:
        role, created = Role.objects.using(self.using).update_or_create(
            tenant=None, name=name, defaults={'is_system': True, 'is_active': True, **fields},
        )
        self.created += int(created)
        return role

    def _grant(self, role: Role, names, permissions: dict) -> None:
        rbac = RbacRepository(self.using)
        for name in dict.fromkeys(names):
            rbac.grant_role_permission(role, permissions[name], reason='System role default permissions')

    def run(self) -> None:
        permissions = self._permissions()
        for tp in TypePersonnel.objects.using(self.using).filter(is_active=True).order_by('id'):
            role = self.attempt(
                tp.name, self._role, tp.name,
                display_name=tp.nom_type, level=tp.level, type_personnel=tp,
                is_medical=tp.is_medical_staff, is_administrative=tp.is_administrative,
            )
            if role is not None:
                self.attempt(tp.name, self._grant, role, ROLE_PERMISSIONS.get(tp.name, []), permissions)
        root = self._role(
            SUPER_ADMIN_ROLE, display_name='Super Administrateur', level=5,
            is_administrative=True, is_assignable=True,
        )
        self._grant(root, permissions, permissions)


class UserRolesSeeder(BaseSeeder):
    """Give every active staff member the role of their personnel type, and the super admin theirs."""
    name = 'user_roles'

    def run(self) -> None:
        rbac = RbacRepository(self.using)
        staff = (
            Personnel.objects.using(self.using)
            .filter(is_active=True, deleted_at__isnull=True)
            .select_related('user', 'tenant', 'type_personnel')
        )
        for personnel in staff:
            role = rbac.get_role(personnel.type_personnel.name)
            if role is None:
                logger.warning("%s: no role for personnel type %s", self.name, personnel.type_personnel.name)
                continue
            self.attempt(
                personnel.user.email, rbac.assign_role, personnel.user, role, personnel.tenant,
                reason='Role of personnel type', is_primary=True,
            )
        root_role = rbac.get_role(SUPER_ADMIN_ROLE)
        if root_role is None:
            return
        for user in User.objects.using(self.using).filter(super_admin__deleted_at__isnull=True, super_admin__isnull=False):
            self.attempt(user.email, rbac.assign_role, user, root_role, None, reason='System super administrator')
