from decimal import Decimal

from rest_framework import serializers

from .fields import clean_text

CLINICAL_TEXT_FIELDS = (
    'chief_complaint', 'history_present_illness', 'physical_examination', 'diagnosis',
    'treatment_plan', 'prescriptions', 'recommendations', 'notes',
)


class VisitDetailsSchema(serializers.Serializer):
    """Clinical notes and vitals a practitioner may record on a visit."""
    chief_complaint = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    history_present_illness = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    physical_examination = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    treatment_plan = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    prescriptions = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    recommendations = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    weight_kg = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True, min_value=Decimal('0'))
    height_cm = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True, min_value=Decimal('0'))
    systolic_bp = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    diastolic_bp = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    heart_rate = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    temperature_c = serializers.DecimalField(max_digits=4, decimal_places=2, required=False, allow_null=True)

    def validate(self, attrs):
        for name in CLINICAL_TEXT_FIELDS:
            if name in attrs:
                attrs[name] = clean_text(attrs[name])
        return attrs
