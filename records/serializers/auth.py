from rest_framework import serializers

from records.models import User


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        v = (v or '').strip().lower()
        if not v:
            raise serializers.ValidationError('Email is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class UserSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    tenantId = serializers.IntegerField(source='tenant_id', allow_null=True)
    isSuperAdmin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'firstName', 'lastName', 'role', 'tenantId', 'isSuperAdmin']

    def get_isSuperAdmin(self, obj) -> bool:
        from records.repositories.super_admins import SuperAdminRepository

        return SuperAdminRepository().for_user(obj.pk) is not None
