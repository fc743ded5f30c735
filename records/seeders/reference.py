"""
Reference data: tenants, the personnel taxonomy and visit types.

These seeders upsert on natural keys, so running them twice leaves the
same rows behind.
"""
from __future__ import annotations

from records.codecs import encode_personnel_type_ids, encode_tenant_settings
from records.models import PersonnelCategory, PersonnelSubcategory, Tenant, TypePersonnel, TypeVisite
from records.repositories.taxonomy import TaxonomyRepository

from .base import BaseSeeder

TENANTS = [
    {
        'name': 'Centre de Santé Dakar', 'subdomain': 'dakar-health',
        'email': 'admin@dakar-health.sn', 'phone': '+221 33 889 00 00',
        'address': 'Plateau, Dakar, Sénégal', 'subscription_plan': 'premium',
        'settings': {
            'language': 'fr', 'timezone': 'Africa/Dakar',
            'features': ['pregnancies', 'vaccinations', 'consultations'],
            'workingHours': '08:00-18:00', 'appointmentDuration': 30,
        },
    },
    {
        'name': 'Clinique Almadies', 'subdomain': 'almadies',
        'email': 'contact@almadies-clinic.sn', 'phone': '+221 33 820 15 15',
        'address': 'Almadies, Dakar, Sénégal', 'subscription_plan': 'basic',
        'settings': {
            'language': 'fr', 'timezone': 'Africa/Dakar',
            'features': ['pregnancies', 'vaccinations'],
            'workingHours': '07:30-19:00', 'appointmentDuration': 45,
        },
    },
    {
        'name': 'Hôpital Régional de Thiès', 'subdomain': 'thies',
        'email': 'admin@hopital-thies.sn', 'phone': '+221 33 951 10 20',
        'address': 'Thiès, Sénégal', 'subscription_plan': 'enterprise',
        'settings': {
            'language': 'wo', 'timezone': 'Africa/Dakar',
            'features': ['pregnancies', 'vaccinations', 'consultations'],
            'workingHours': '24/7', 'appointmentDuration': 30,
        },
    },
    {
        'name': 'Clinique Démo Sénégal', 'subdomain': 'demo',
        'email': 'contact@demo.sn', 'phone': '+221 33 123 45 67',
        'address': 'Dakar, Sénégal', 'subscription_plan': 'basic',
        'settings': {
            'language': 'fr', 'timezone': 'Africa/Dakar',
            'features': ['pregnancies', 'vaccinations', 'consultations'],
            'demoMode': True, 'workingHours': '08:00-17:00', 'appointmentDuration': 30,
        },
    },
]

# (name, display name, description, colour, icon)
CATEGORIES = [
    ('medical', 'Médical', 'Personnel médical qualifié', '#2E7D32', 'fa-user-md'),
    ('paramedical', 'Paramédical', 'Personnel paramédical et soignant', '#1976D2', 'fa-user-nurse'),
    ('administratif', 'Administratif', 'Personnel administratif et de gestion', '#FFC107', 'fa-user-tie'),
    ('technique', 'Technique', 'Personnel technique et de maintenance', '#9C27B0', 'fa-user-cog'),
]

# category -> [(name, display name, description, requires specialization)]
SUBCATEGORIES = {
    'medical': [
        ('obstetrique', 'Obstétrique', 'Spécialité obstétrique et gynécologie', True),
        ('pediatrie', 'Pédiatrie', 'Spécialité pédiatrique', True),
        ('medecine_generale', 'Médecine Générale', 'Médecine générale', False),
        ('anesthesie', 'Anesthésie', 'Anesthésie-réanimation', True),
    ],
    'paramedical': [
        ('soins_generaux', 'Soins Généraux', 'Soins infirmiers généraux', False),
        ('soins_specialises', 'Soins Spécialisés', 'Soins infirmiers spécialisés', True),
        ('reeducation', 'Rééducation', 'Kinésithérapie et rééducation', True),
    ],
    'administratif': [
        ('direction', 'Direction', 'Direction et management', False),
        ('gestion', 'Gestion', 'Gestion administrative', False),
        ('accueil', 'Accueil', 'Accueil et orientation', False),
    ],
}

PERSONNEL_TYPES = [
    {'category': 'medical', 'subcategory': 'obstetrique', 'name': 'sage_femme_junior',
     'nom_type': 'Sage-femme Junior', 'level': 1, 'can_prescribe': True,
     'requires_license': True, 'is_medical_staff': True, 'sort_order': 1},
    {'category': 'medical', 'subcategory': 'obstetrique', 'name': 'sage_femme',
     'nom_type': 'Sage-femme', 'level': 2, 'can_prescribe': True, 'can_validate_acts': True,
     'requires_license': True, 'min_experience_years': 2, 'is_medical_staff': True, 'sort_order': 2},
    {'category': 'medical', 'subcategory': 'obstetrique', 'name': 'sage_femme_senior',
     'nom_type': 'Sage-femme Senior', 'level': 3, 'can_prescribe': True, 'can_supervise': True,
     'can_validate_acts': True, 'requires_license': True, 'min_experience_years': 5,
     'is_medical_staff': True, 'sort_order': 3},
    {'category': 'medical', 'subcategory': 'obstetrique', 'name': 'gyneco_obstetricien',
     'nom_type': 'Gynéco-obstétricien', 'level': 4, 'can_prescribe': True, 'can_supervise': True,
     'can_validate_acts': True, 'requires_license': True, 'min_experience_years': 5,
     'is_medical_staff': True, 'sort_order': 4},
    {'category': 'medical', 'subcategory': 'pediatrie', 'name': 'pediatre',
     'nom_type': 'Pédiatre', 'level': 3, 'can_prescribe': True, 'can_supervise': True,
     'can_validate_acts': True, 'requires_license': True, 'min_experience_years': 3,
     'is_medical_staff': True, 'sort_order': 1},
    {'category': 'medical', 'subcategory': 'medecine_generale', 'name': 'medecin_generaliste',
     'nom_type': 'Médecin Généraliste', 'level': 2, 'can_prescribe': True, 'can_validate_acts': True,
     'requires_license': True, 'is_medical_staff': True, 'sort_order': 1},
    {'category': 'paramedical', 'subcategory': 'soins_generaux', 'name': 'infirmier',
     'nom_type': 'Infirmier/ère', 'level': 2, 'requires_license': True,
     'is_medical_staff': True, 'sort_order': 1},
    {'category': 'paramedical', 'subcategory': 'soins_generaux', 'name': 'infirmier_senior',
     'nom_type': 'Infirmier/ère Senior', 'level': 3, 'can_supervise': True, 'requires_license': True,
     'min_experience_years': 5, 'is_medical_staff': True, 'sort_order': 2},
    {'category': 'administratif', 'subcategory': 'direction', 'name': 'directeur_medical',
     'nom_type': 'Directeur Médical', 'level': 4, 'can_supervise': True, 'can_validate_acts': True,
     'is_medical_staff': True, 'is_administrative': True, 'sort_order': 1},
    {'category': 'administratif', 'subcategory': 'gestion', 'name': 'secretaire_medicale',
     'nom_type': 'Secrétaire Médicale', 'level': 1, 'is_administrative': True, 'sort_order': 1},
    {'category': 'administratif', 'subcategory': 'accueil', 'name': 'receptionniste',
     'nom_type': 'Réceptionniste', 'level': 1, 'is_administrative': True, 'sort_order': 1},
]

VISIT_TYPES = [
    {'name': 'consultation_prenatal_1t', 'nom_type': 'Consultation prénatale 1er trimestre',
     'duration_minutes': 45, 'requires_midwife': True, 'color_code': '#E91E63', 'icon': 'fa-baby',
     'allowed': ['sage_femme_junior', 'sage_femme', 'sage_femme_senior', 'gyneco_obstetricien']},
    {'name': 'consultation_prenatal_2t', 'nom_type': 'Consultation prénatale 2ème trimestre',
     'duration_minutes': 30, 'requires_midwife': True, 'color_code': '#E91E63', 'icon': 'fa-baby',
     'allowed': ['sage_femme', 'sage_femme_senior', 'gyneco_obstetricien']},
    {'name': 'consultation_prenatal_risque', 'nom_type': 'Consultation grossesse à risque',
     'duration_minutes': 60, 'requires_doctor': True, 'color_code': '#F44336', 'icon': 'fa-exclamation',
     'allowed': ['gyneco_obstetricien']},
    {'name': 'consultation_generale', 'nom_type': 'Consultation générale',
     'duration_minutes': 30, 'requires_doctor': True, 'icon': 'fa-stethoscope', 'allowed': []},
    {'name': 'vaccination_routine', 'nom_type': 'Vaccination de routine',
     'duration_minutes': 15, 'requires_nurse': True, 'color_code': '#4CAF50', 'icon': 'fa-syringe',
     'allowed': ['infirmier', 'infirmier_senior', 'sage_femme', 'pediatre']},
    {'name': 'urgence_obstetricale', 'nom_type': 'Urgence obstétricale',
     'duration_minutes': 60, 'requires_appointment': False, 'is_emergency': True,
     'requires_doctor': True, 'color_code': '#B71C1C', 'icon': 'fa-ambulance',
     'allowed': ['sage_femme_senior', 'gyneco_obstetricien']},
]


class TenantsSeeder(BaseSeeder):
    name = 'tenants'

    def _upsert(self, data: dict) -> Tenant:
        data = dict(data)
        data['settings'] = encode_tenant_settings(data['settings'])
        data.setdefault('status', 'active')
        tenant, created = Tenant.objects.using(self.using).update_or_create(
            subdomain=data.pop('subdomain'), defaults=data,
        )
        self.created += int(created)
        return tenant

    def run(self) -> None:
        for data in TENANTS:
            self.attempt(data['subdomain'], self._upsert, data)


class TaxonomySeeder(BaseSeeder):
    name = 'taxonomy'

    def run(self) -> None:
        categories = {}
        for order, (name, display, description, colour, icon) in enumerate(CATEGORIES, start=1):
            categories[name], _ = PersonnelCategory.objects.using(self.using).update_or_create(
                name=name,
                defaults={'nom_category': display, 'description': description, 'color_code': colour,
                          'icon': icon, 'sort_order': order, 'is_active': True},
            )

        subcategories = {}
        for category_name, rows in SUBCATEGORIES.items():
            for order, (name, display, description, specialised) in enumerate(rows, start=1):
                subcategories[name], _ = PersonnelSubcategory.objects.using(self.using).update_or_create(
                    category=categories[category_name], name=name,
                    defaults={'nom_subcategory': display, 'description': description,
                              'requires_specialization': specialised, 'sort_order': order,
                              'is_active': True},
                )

        for row in PERSONNEL_TYPES:
            row = dict(row)
            category = categories[row.pop('category')]
            subcategory = subcategories[row.pop('subcategory')]
            name = row.pop('name')
            self.attempt(
                name,
                TypePersonnel.objects.using(self.using).update_or_create,
                name=name,
                defaults={'category': category, 'subcategory': subcategory, 'is_active': True, **row},
            )
        TaxonomyRepository(self.using).invalidate_paths()


class TypeVisiteSeeder(BaseSeeder):
    name = 'type_visite'

    def run(self) -> None:
        type_ids = dict(TypePersonnel.objects.using(self.using).values_list('name', 'pk'))
        for order, row in enumerate(VISIT_TYPES, start=1):
            row = dict(row)
            allowed = [type_ids[n] for n in row.pop('allowed') if n in type_ids]
            name = row.pop('name')
            self.attempt(
                name,
                TypeVisite.objects.using(self.using).update_or_create,
                name=name,
                defaults={'allowed_personnel_types': encode_personnel_type_ids(allowed),
                          'sort_order': order, 'is_active': True, **row},
            )
