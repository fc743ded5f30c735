from rest_framework import serializers

from .fields import clean_text


class SuperAdminSchema(serializers.Serializer):
    access_level = serializers.CharField(max_length=50, default='full')
    permissions_override = serializers.DictField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_notes(self, v):
        return clean_text(v)
