from rest_framework import serializers

from records.models import CrossTenantAccessLog


class QrScanSerializer(serializers.Serializer):
    qr_code = serializers.CharField(max_length=100)


class AccessLogSerializer(serializers.ModelSerializer):
    scannerUserId = serializers.IntegerField(source='scanner_user_id')
    scannerTenantId = serializers.IntegerField(source='scanner_tenant_id', allow_null=True)
    patientId = serializers.IntegerField(source='patient_id')
    patientTenantId = serializers.IntegerField(source='patient_tenant_id')
    accessLevel = serializers.CharField(source='access_level')
    accessGranted = serializers.BooleanField(source='access_granted')
    accessedAt = serializers.DateTimeField(source='accessed_at')

    class Meta:
        model = CrossTenantAccessLog
        fields = [
            'id', 'scannerUserId', 'scannerTenantId', 'patientId', 'patientTenantId',
            'accessLevel', 'accessGranted', 'accessedAt',
        ]
