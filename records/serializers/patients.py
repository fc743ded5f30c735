from rest_framework import serializers

from records.models import Patient

from .fields import clean_text

FREE_TEXT_FIELDS = (
    'first_name', 'last_name', 'national_id', 'phone', 'email', 'address', 'city', 'region',
    'emergency_contact_name', 'emergency_contact_phone', 'emergency_contact_relation', 'notes',
)


class PatientSchema(serializers.Serializer):
    patient_number = serializers.CharField(required=False, allow_blank=True, max_length=50)
    national_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Patient.GENDER_CHOICES)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=20)
    email = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)
    address = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)
    region = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)
    emergency_contact_name = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)
    emergency_contact_phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=20)
    emergency_contact_relation = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    blood_type = serializers.ChoiceField(choices=Patient.BLOOD_TYPE_CHOICES, required=False, allow_null=True)
    allergies = serializers.ListField(child=serializers.CharField(max_length=200), required=False, allow_null=True)
    medical_history = serializers.DictField(required=False, allow_null=True)
    current_medications = serializers.ListField(child=serializers.CharField(max_length=200), required=False, allow_null=True)
    assigned_doctor_id = serializers.IntegerField(required=False, allow_null=True)
    assigned_midwife_id = serializers.IntegerField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        for name in FREE_TEXT_FIELDS:
            if name in attrs:
                attrs[name] = clean_text(attrs[name])
        for name in ('first_name', 'last_name'):
            if name in attrs and not attrs[name]:
                raise serializers.ValidationError({name: 'This field may not be blank.'})
        return attrs
