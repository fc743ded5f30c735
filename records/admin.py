"""
Django admin registrations for the records models.

Visit histories and cross-tenant access logs are exposed read-only:
rows are append-only and the models refuse updates and deletes.
"""

from django.contrib import admin

from .models import (
    CrossTenantAccessLog,
    MedicalHistory,
    Patient,
    PatientQr,
    Permission,
    Personnel,
    PersonnelCategory,
    PersonnelSubcategory,
    Role,
    RolePermission,
    SuperAdmin,
    Tenant,
    TypePersonnel,
    TypeVisite,
    User,
    UserPermission,
    UserRole,
    Visit,
    VisitHistory,
)


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'subdomain', 'status', 'subscription_plan', 'deleted_at')
    list_filter = ('status', 'subscription_plan')
    search_fields = ('name', 'subdomain', 'domain', 'email')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'tenant', 'role', 'status', 'last_login_at')
    list_filter = ('role', 'status', 'tenant')
    search_fields = ('email', 'first_name', 'last_name')
    exclude = ('password',)


@admin.register(PersonnelCategory)
class PersonnelCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'nom_category', 'sort_order', 'is_active')
    ordering = ('sort_order',)


@admin.register(PersonnelSubcategory)
class PersonnelSubcategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'nom_subcategory', 'category', 'sort_order', 'is_active')
    list_filter = ('category',)


@admin.register(TypePersonnel)
class TypePersonnelAdmin(admin.ModelAdmin):
    list_display = ('name', 'nom_type', 'category', 'subcategory', 'level', 'is_medical_staff', 'is_active')
    list_filter = ('category', 'is_medical_staff', 'can_prescribe')
    search_fields = ('name', 'nom_type')


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('name', 'display_name', 'tenant', 'level', 'type_personnel', 'is_system', 'is_active')
    list_filter = ('is_system', 'is_medical', 'is_active')
    search_fields = ('name', 'display_name')


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    list_display = ('name', 'module', 'action', 'scope', 'min_level_required', 'is_active')
    list_filter = ('module', 'scope', 'is_sensitive')
    search_fields = ('name', 'display_name')


@admin.register(RolePermission)
class RolePermissionAdmin(admin.ModelAdmin):
    list_display = ('role', 'permission', 'tenant', 'valid_until', 'is_active')
    list_filter = ('role',)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'tenant', 'is_primary', 'expires_at', 'is_active')
    list_filter = ('role', 'tenant', 'is_active')
    search_fields = ('user__email',)


@admin.register(UserPermission)
class UserPermissionAdmin(admin.ModelAdmin):
    list_display = ('user', 'permission', 'tenant', 'expires_at', 'is_active')
    search_fields = ('user__email', 'permission__name')


@admin.register(Personnel)
class PersonnelAdmin(admin.ModelAdmin):
    list_display = ('user', 'tenant', 'type_personnel', 'is_active', 'is_on_duty')
    list_filter = ('tenant', 'is_active', 'is_on_duty')
    search_fields = ('user__email', 'license_number')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_number', 'last_name', 'first_name', 'tenant', 'is_active')
    list_filter = ('tenant', 'is_active', 'gender')
    search_fields = ('patient_number', 'first_name', 'last_name', 'phone')


@admin.register(TypeVisite)
class TypeVisiteAdmin(admin.ModelAdmin):
    list_display = ('name', 'nom_type', 'duration_minutes', 'is_emergency', 'is_active')


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'personnel', 'type_visite', 'scheduled_at', 'status')
    list_filter = ('status', 'tenant')
    search_fields = ('patient__last_name', 'patient__patient_number')


@admin.register(VisitHistory)
class VisitHistoryAdmin(admin.ModelAdmin):
    list_display = ('visit', 'action', 'modified_by', 'action_date')
    list_filter = ('action',)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MedicalHistory)
class MedicalHistoryAdmin(admin.ModelAdmin):
    list_display = ('patient', 'type', 'title', 'severity', 'is_active')
    list_filter = ('type', 'severity')


@admin.register(SuperAdmin)
class SuperAdminAdmin(admin.ModelAdmin):
    list_display = ('user', 'access_level', 'deleted_at')


@admin.register(PatientQr)
class PatientQrAdmin(admin.ModelAdmin):
    list_display = ('qr_code', 'patient', 'is_active', 'expires_at', 'scan_count')
    list_filter = ('is_active',)


@admin.register(CrossTenantAccessLog)
class CrossTenantAccessLogAdmin(admin.ModelAdmin):
    list_display = ('accessed_at', 'scanner_user', 'scanner_tenant', 'patient', 'patient_tenant', 'access_level', 'access_granted')
    list_filter = ('access_level', 'access_granted', 'access_type')

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
