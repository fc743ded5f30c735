"""
Database models for the SamaCarnet records backend.

These models capture the multi-tenant medical records domain: tenants
and their users, the personnel taxonomy (category > subcategory > type),
personnel, patients, visit types, visits with their append-only history,
medical histories, super administrators, patient QR codes, the role and
permission catalogue and the audit trail of QR scans.  Table and
column names follow the historical schema so existing databases can be
served without renaming anything.

Structured columns are plain ``JSONField`` values; the normalisation of
their content lives in :mod:`records.codecs` and is applied by the
repositories, never by the models themselves.
"""
from __future__ import annotations

from datetime import date

from django.contrib.auth.models import AbstractUser
from django.db import models, router
from django.utils import timezone

from .exceptions import ImmutableRecordError


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Tenant(TimestampedModel):
    """Top-level isolation boundary: one customer organisation.

    A tenant may carry its own database connection parameters when it is
    hosted on a physically separate database; otherwise it shares the
    default connection.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('suspended', 'Suspended'),
    ]
    PLAN_CHOICES = [
        ('basic', 'Basic'),
        ('premium', 'Premium'),
        ('enterprise', 'Enterprise'),
    ]
    name = models.CharField(max_length=100)
    subdomain = models.CharField(max_length=50, unique=True)
    domain = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    email = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    settings = models.JSONField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    subscription_plan = models.CharField(max_length=10, choices=PLAN_CHOICES, default='basic')
    subscription_expires_at = models.DateTimeField(null=True, blank=True)
    database_name = models.CharField(max_length=100, null=True, blank=True)
    database_host = models.CharField(max_length=100, null=True, blank=True)
    database_port = models.IntegerField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'tenants'
        indexes = [
            models.Index(fields=['created_at'], name='tenants_created_at_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.subdomain})"

    @property
    def is_active(self) -> bool:
        if self.status != 'active':
            return False
        if self.subscription_expires_at is None:
            return True
        return self.subscription_expires_at > timezone.now()

    def get_setting(self, key: str, default=None):
        from .codecs import decode_tenant_settings

        return decode_tenant_settings(self.settings).get(key, default)

    def database_config(self) -> dict | None:
        """Connection parameters of a dedicated database, or ``None`` when shared."""
        if not self.database_name:
            return None
        return {
            'NAME': self.database_name,
            'HOST': self.database_host or '',
            'PORT': str(self.database_port) if self.database_port else '',
        }


class User(AbstractUser):
    """Tenant-scoped account.

    Emails are unique per tenant, not globally, so ``username`` is derived
    from the email and tenant when it is not given explicitly.
    """
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('midwife', 'Midwife'),
        ('patient', 'Patient'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('suspended', 'Suspended'),
    ]
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='users'
    )
    phone = models.CharField(max_length=20, null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, null=True, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='patient')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    last_login_at = models.DateTimeField(null=True, blank=True)
    last_login_ip = models.CharField(max_length=45, null=True, blank=True)
    preferred_language = models.CharField(max_length=5, default='fr')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'users'
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'email'], name='users_tenant_email_uniq'),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status'], name='users_tenant_status_idx'),
            models.Index(fields=['email'], name='users_email_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    def save(self, *args, **kwargs):
        if not self.username:
            self.username = f"{(self.email or '').lower()}+t{self.tenant_id or 0}"
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PersonnelCategory(TimestampedModel):
    name = models.CharField(max_length=100, unique=True)
    nom_category = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    color_code = models.CharField(max_length=7, null=True, blank=True, default='#2E7D32')
    icon = models.CharField(max_length=50, null=True, blank=True, default='fa-user')
    sort_order = models.IntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'personnel_categories'

    def __str__(self) -> str:
        return self.nom_category


class PersonnelSubcategory(TimestampedModel):
    """Second level of the personnel taxonomy.

    A category's subcategories are reached through ``category.subcategories``;
    subcategories never nest further.
    """
    category = models.ForeignKey(
        PersonnelCategory, on_delete=models.CASCADE, related_name='subcategories'
    )
    name = models.CharField(max_length=100, db_index=True)
    nom_subcategory = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    requires_specialization = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'personnel_subcategories'
        constraints = [
            models.UniqueConstraint(fields=['category', 'name'], name='subcategory_category_name_uniq'),
        ]

    def __str__(self) -> str:
        return self.nom_subcategory


class TypePersonnel(TimestampedModel):
    LEVEL_DESCRIPTIONS = {
        1: 'Junior',
        2: 'Confirmé',
        3: 'Senior',
        4: 'Chef/Directeur',
    }
    category = models.ForeignKey(
        PersonnelCategory, on_delete=models.RESTRICT, related_name='personnel_types'
    )
    subcategory = models.ForeignKey(
        PersonnelSubcategory, null=True, blank=True, on_delete=models.SET_NULL, related_name='personnel_types'
    )
    name = models.CharField(max_length=100, unique=True)
    nom_type = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    level = models.IntegerField(default=1)
    can_prescribe = models.BooleanField(default=False)
    can_supervise = models.BooleanField(default=False)
    can_validate_acts = models.BooleanField(default=False)
    requires_license = models.BooleanField(default=False)
    min_experience_years = models.IntegerField(default=0)
    is_medical_staff = models.BooleanField(default=False)
    is_administrative = models.BooleanField(default=False)
    is_technical = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'type_personnels'
        indexes = [
            models.Index(fields=['category', 'level'], name='type_pers_category_level_idx'),
            models.Index(fields=['is_medical_staff', 'is_active'], name='type_pers_medical_active_idx'),
        ]

    def __str__(self) -> str:
        return self.nom_type

    @property
    def has_medical_permissions(self) -> bool:
        return self.can_prescribe or self.can_validate_acts or self.is_medical_staff

    @property
    def is_supervision_role(self) -> bool:
        return self.can_supervise and self.level >= 3

    @property
    def level_description(self) -> str:
        return self.LEVEL_DESCRIPTIONS.get(self.level, 'Non défini')


SCOPE_CHOICES = [
    ('own', 'Own'),
    ('department', 'Department'),
    ('tenant', 'Tenant'),
    ('global', 'Global'),
]


class Role(TimestampedModel):
    """A named bundle of permissions.

    Roles without a tenant are system-wide; ``level`` ranks them on the same
    1-4 seniority scale as personnel types.
    """
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='roles'
    )
    name = models.CharField(max_length=100, db_index=True)
    display_name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    level = models.IntegerField(default=1)
    is_system = models.BooleanField(default=False)
    is_medical = models.BooleanField(default=False)
    is_administrative = models.BooleanField(default=False)
    type_personnel = models.ForeignKey(
        TypePersonnel, null=True, blank=True, on_delete=models.SET_NULL, related_name='roles'
    )
    is_active = models.BooleanField(default=True)
    is_assignable = models.BooleanField(default=True)

    class Meta:
        db_table = 'roles'
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'name'], name='roles_tenant_name_uniq'),
        ]
        indexes = [
            models.Index(fields=['level', 'is_active'], name='roles_level_active_idx'),
        ]

    def __str__(self) -> str:
        return self.display_name


class Permission(TimestampedModel):
    name = models.CharField(max_length=100, unique=True)
    display_name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    module = models.CharField(max_length=50, db_index=True)
    action = models.CharField(max_length=50, db_index=True)
    scope = models.CharField(max_length=10, choices=SCOPE_CHOICES, default='own')
    requires_supervision = models.BooleanField(default=False)
    min_level_required = models.IntegerField(null=True, blank=True)
    is_system = models.BooleanField(default=False)
    is_medical = models.BooleanField(default=False)
    is_sensitive = models.BooleanField(default=False)
    requires_audit = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'permissions'
        indexes = [
            models.Index(fields=['module', 'action'], name='permissions_module_action_idx'),
        ]

    def __str__(self) -> str:
        return self.name


class UserRole(TimestampedModel):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='role_assignments')
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='role_assignments'
    )
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='assignments')
    department = models.CharField(max_length=100, null=True, blank=True)
    service = models.CharField(max_length=100, null=True, blank=True)
    assigned_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    assigned_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+', db_column='assigned_by'
    )
    assignment_reason = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    is_primary = models.BooleanField(default=False)

    class Meta:
        db_table = 'user_roles'
        constraints = [
            models.UniqueConstraint(fields=['user', 'tenant', 'role'], name='user_roles_user_tenant_role_uniq'),
        ]
        indexes = [
            models.Index(fields=['user', 'is_active'], name='user_roles_user_active_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.role_id}"


class RolePermission(TimestampedModel):
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='grants')
    permission = models.ForeignKey(Permission, on_delete=models.CASCADE, related_name='role_grants')
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='role_permissions'
    )
    scope_override = models.CharField(max_length=10, choices=SCOPE_CHOICES, null=True, blank=True)
    valid_from = models.DateTimeField(null=True, blank=True)
    valid_until = models.DateTimeField(null=True, blank=True, db_index=True)
    granted_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+', db_column='granted_by'
    )
    granted_at = models.DateTimeField(default=timezone.now)
    grant_reason = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'role_permissions'
        constraints = [
            models.UniqueConstraint(
                fields=['role', 'permission', 'tenant'], name='role_perms_role_perm_tenant_uniq'
            ),
        ]


class UserPermission(TimestampedModel):
    """A permission granted to one user directly, outside any role."""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='permission_grants')
    permission = models.ForeignKey(Permission, on_delete=models.CASCADE, related_name='user_grants')
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='user_permissions'
    )
    granted_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+', db_column='granted_by'
    )
    granted_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    grant_reason = models.TextField(null=True, blank=True)
    scope_override = models.CharField(max_length=10, choices=SCOPE_CHOICES, null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'user_permissions'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'permission', 'tenant'], name='user_perms_user_perm_tenant_uniq'
            ),
        ]


class Personnel(TimestampedModel):
    CONTRACT_CHOICES = [
        ('CDI', 'CDI'),
        ('CDD', 'CDD'),
        ('VACATION', 'Vacation'),
        ('STAGE', 'Stage'),
    ]
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='personnel')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='personnel_records')
    type_personnel = models.ForeignKey(TypePersonnel, on_delete=models.RESTRICT, related_name='personnel')
    license_number = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    specialties = models.JSONField(null=True, blank=True)
    department = models.CharField(max_length=100, null=True, blank=True)
    service = models.CharField(max_length=100, null=True, blank=True)
    hire_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    contract_type = models.CharField(max_length=10, choices=CONTRACT_CHOICES, default='CDI')
    is_active = models.BooleanField(default=True)
    is_on_duty = models.BooleanField(default=False, db_index=True)
    notes = models.TextField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'personnel'
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'user'], name='personnel_tenant_user_uniq'),
        ]
        indexes = [
            models.Index(fields=['tenant', 'type_personnel'], name='personnel_tenant_type_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.user.full_name} ({self.type_personnel.nom_type})"


class Patient(TimestampedModel):
    """A patient record inside one tenant.

    ``patient_number`` is assigned on first save when left blank, as
    ``P<YY><n>`` where ``n`` is the tenant's patient count plus one, zero
    padded to six digits, moved past any number already taken in the tenant.
    """
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
    ]
    BLOOD_TYPE_CHOICES = [(bt, bt) for bt in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='patients')
    patient_number = models.CharField(max_length=50, db_index=True)
    national_id = models.CharField(max_length=50, null=True, blank=True, db_index=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    phone = models.CharField(max_length=20, null=True, blank=True)
    email = models.CharField(max_length=100, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    city = models.CharField(max_length=100, null=True, blank=True)
    region = models.CharField(max_length=100, null=True, blank=True)
    emergency_contact_name = models.CharField(max_length=100, null=True, blank=True)
    emergency_contact_phone = models.CharField(max_length=20, null=True, blank=True)
    emergency_contact_relation = models.CharField(max_length=50, null=True, blank=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, null=True, blank=True)
    allergies = models.JSONField(null=True, blank=True)
    medical_history = models.JSONField(null=True, blank=True)
    current_medications = models.JSONField(null=True, blank=True)
    assigned_doctor = models.ForeignKey(
        Personnel, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_patients'
    )
    assigned_midwife = models.ForeignKey(
        Personnel, null=True, blank=True, on_delete=models.SET_NULL, related_name='midwife_patients'
    )
    is_active = models.BooleanField(default=True)
    notes = models.TextField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'patients'
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'patient_number'], name='patients_tenant_number_uniq'),
            models.UniqueConstraint(fields=['patient_number', 'national_id'], name='patients_number_national_uniq'),
        ]
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='patients_tenant_active_idx'),
            models.Index(fields=['first_name', 'last_name'], name='patients_name_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.patient_number})"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.patient_number:
            using = kwargs.get('using') or router.db_for_write(type(self), instance=self)
            siblings = type(self).objects.using(using).filter(tenant_id=self.tenant_id)
            year = timezone.now().strftime('%y')
            n = siblings.count() + 1
            # explicitly numbered patients may already hold the next slot
            while siblings.filter(patient_number=f"P{year}{n:06d}").exists():
                n += 1
            self.patient_number = f"P{year}{n:06d}"
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def age(self) -> int:
        today = date.today()
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))

    def has_allergy(self, allergen: str) -> bool:
        from .codecs import decode_allergies

        needle = allergen.lower()
        return any(needle in allergy.lower() for allergy in decode_allergies(self.allergies))


class TypeVisite(TimestampedModel):
    name = models.CharField(max_length=100, unique=True)
    nom_type = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    duration_minutes = models.IntegerField(default=30)
    requires_appointment = models.BooleanField(default=True)
    is_emergency = models.BooleanField(default=False)
    requires_doctor = models.BooleanField(default=False)
    requires_midwife = models.BooleanField(default=False)
    requires_nurse = models.BooleanField(default=False)
    allowed_personnel_types = models.JSONField(null=True, blank=True)
    color_code = models.CharField(max_length=7, null=True, blank=True, default='#2E7D32')
    icon = models.CharField(max_length=50, null=True, blank=True, default='fa-calendar')
    sort_order = models.IntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'type_visite'
        indexes = [
            models.Index(fields=['is_emergency', 'is_active'], name='type_visite_emergency_idx'),
        ]

    def __str__(self) -> str:
        return self.nom_type


class Visit(TimestampedModel):
    STATUS_CHOICES = [
        ('scheduled', 'Scheduled'),
        ('in_progress', 'In progress'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
        ('no_show', 'No show'),
    ]
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='visits')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='visits')
    personnel = models.ForeignKey(Personnel, on_delete=models.RESTRICT, related_name='visits')
    type_visite = models.ForeignKey(TypeVisite, on_delete=models.RESTRICT, related_name='visits')
    scheduled_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)
    duration_minutes = models.IntegerField(null=True, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='scheduled', db_index=True)
    chief_complaint = models.TextField(null=True, blank=True)
    history_present_illness = models.TextField(null=True, blank=True)
    physical_examination = models.TextField(null=True, blank=True)
    diagnosis = models.TextField(null=True, blank=True)
    treatment_plan = models.TextField(null=True, blank=True)
    prescriptions = models.TextField(null=True, blank=True)
    recommendations = models.TextField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    bmi = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    systolic_bp = models.IntegerField(null=True, blank=True)
    diastolic_bp = models.IntegerField(null=True, blank=True)
    heart_rate = models.IntegerField(null=True, blank=True)
    temperature_c = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'visite'
        indexes = [
            models.Index(fields=['tenant', 'status'], name='visite_tenant_status_idx'),
            models.Index(fields=['patient', 'scheduled_at'], name='visite_patient_sched_idx'),
            models.Index(fields=['personnel', 'scheduled_at'], name='visite_personnel_sched_idx'),
        ]

    def __str__(self) -> str:
        return f"Visit {self.pk} ({self.status})"

    @property
    def blood_pressure(self) -> str | None:
        if not self.systolic_bp or not self.diastolic_bp:
            return None
        return f"{self.systolic_bp}/{self.diastolic_bp}"


class MedicalHistory(TimestampedModel):
    TYPE_CHOICES = [
        ('allergy', 'Allergy'),
        ('condition', 'Condition'),
        ('surgery', 'Surgery'),
        ('medication', 'Medication'),
        ('family_history', 'Family history'),
    ]
    SEVERITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('critical', 'Critical'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='medical_histories')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    date_recorded = models.DateField(null=True, blank=True)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'medical_histories'
        indexes = [
            models.Index(fields=['patient', 'type'], name='med_hist_patient_type_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.get_type_display()}: {self.title}"


class AppendOnlyQuerySet(models.QuerySet):
    """Audit rows are append-only; bulk mutation is refused."""

    def update(self, **kwargs):
        raise ImmutableRecordError(f"{self.model._meta.verbose_name} rows cannot be updated")

    def delete(self):
        raise ImmutableRecordError(f"{self.model._meta.verbose_name} rows cannot be deleted")


class AppendOnlyModel(TimestampedModel):
    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(f"{self._meta.verbose_name} rows cannot be updated")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f"{self._meta.verbose_name} rows cannot be deleted")


class VisitHistory(AppendOnlyModel):
    ACTION_CHOICES = [
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('cancelled', 'Cancelled'),
        ('completed', 'Completed'),
        ('rescheduled', 'Rescheduled'),
    ]
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='histories')
    modified_by = models.ForeignKey(
        Personnel, on_delete=models.RESTRICT, related_name='visit_histories', db_column='modified_by'
    )
    action = models.CharField(max_length=12, choices=ACTION_CHOICES)
    changes = models.JSONField(null=True, blank=True)
    reason = models.TextField(null=True, blank=True)
    action_date = models.DateTimeField()

    class Meta:
        db_table = 'visit_histories'
        indexes = [
            models.Index(fields=['visit', 'action_date'], name='visit_hist_visit_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.visit_id}: {self.action} at {self.action_date:%Y-%m-%d %H:%M}"


class SuperAdmin(TimestampedModel):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='super_admin')
    access_level = models.CharField(max_length=50, default='full')
    permissions_override = models.JSONField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'super_admins'

    def __str__(self) -> str:
        return f"{self.user.email} ({self.access_level})"

    @property
    def has_full_access(self) -> bool:
        return self.access_level == 'full'


class PatientQr(TimestampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='qr_codes')
    qr_code = models.CharField(max_length=100, unique=True)
    qr_code_image = models.TextField()
    is_active = models.BooleanField(default=True, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    last_scanned_at = models.DateTimeField(null=True, blank=True)
    scan_count = models.IntegerField(default=0)

    class Meta:
        db_table = 'patient_qrs'

    def __str__(self) -> str:
        return f"QR {self.qr_code} for patient {self.patient_id}"

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()


class CrossTenantAccessLog(AppendOnlyModel):
    """One row per QR scan that resolved a patient, granted or not."""
    ACCESS_LEVEL_CHOICES = [
        ('full', 'Full'),
        ('basic', 'Basic'),
        ('emergency', 'Emergency'),
        ('none', 'None'),
    ]
    ACCESS_TYPE_CHOICES = [
        ('qr_scan', 'QR scan'),
        ('emergency_token', 'Emergency token'),
        ('direct_access', 'Direct access'),
    ]
    scanner_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='cross_tenant_accesses')
    scanner_tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.CASCADE, related_name='outgoing_accesses'
    )
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='access_logs')
    patient_tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='incoming_accesses')
    qr_code = models.CharField(max_length=100, null=True, blank=True)
    access_level = models.CharField(max_length=10, choices=ACCESS_LEVEL_CHOICES)
    access_type = models.CharField(max_length=20, choices=ACCESS_TYPE_CHOICES)
    ip_address = models.CharField(max_length=45, null=True, blank=True)
    user_agent = models.CharField(max_length=255, null=True, blank=True)
    accessed_data = models.JSONField(null=True, blank=True)
    access_granted = models.BooleanField()
    denial_reason = models.CharField(max_length=255, null=True, blank=True)
    accessed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'cross_tenant_access_logs'
        indexes = [
            models.Index(fields=['scanner_user', 'accessed_at'], name='idx_scanner_access'),
            models.Index(fields=['patient', 'accessed_at'], name='idx_patient_access'),
            models.Index(fields=['scanner_tenant', 'patient_tenant'], name='idx_cross_tenant'),
            models.Index(fields=['access_level', 'access_granted'], name='idx_access_result'),
        ]

    def __str__(self) -> str:
        return f"{self.scanner_user_id} -> patient {self.patient_id} ({self.access_level})"

    @property
    def is_cross_tenant(self) -> bool:
        return self.scanner_tenant_id != self.patient_tenant_id
