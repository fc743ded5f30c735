from rest_framework import serializers

from records.models import MedicalHistory

from .fields import clean_text


class MedicalHistorySchema(serializers.Serializer):
    type = serializers.ChoiceField(choices=MedicalHistory.TYPE_CHOICES)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    date_recorded = serializers.DateField(required=False, allow_null=True)
    severity = serializers.ChoiceField(choices=MedicalHistory.SEVERITY_CHOICES, required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)

    def validate_title(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Title is required')
        return v

    def validate_description(self, v):
        return clean_text(v)
