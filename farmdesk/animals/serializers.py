from django.utils import timezone
from rest_framework import serializers
from .models import Animal, Vaccination


class AnimalSerializer(serializers.ModelSerializer):
    is_removed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Animal
        fields = ['id', 'farm', 'identification_code', 'species', 'breed', 'gender', 'birth_date', 'weight',
                  'status', 'last_vaccine_date', 'notes', 'is_removed', 'removed_at', 'removal_reason',
                  'removal_notes', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'removed_at', 'removal_reason', 'removal_notes', 'created_at', 'updated_at']

    def validate_identification_code(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Identification code is required')
        return value

    def validate_birth_date(self, value):
        if value and value > timezone.localdate():
            raise serializers.ValidationError('Birth date cannot be in the future')
        return value

    def validate_weight(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError('Weight must be greater than zero')
        return value

    def validate(self, attrs):
        farm = self.context.get('farm') or (self.instance.farm if self.instance else None)
        code = attrs.get('identification_code')
        if farm is not None and code:
            duplicates = Animal.objects.filter(farm=farm, identification_code=code)
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError({'identification_code': 'An animal with this code already exists on this farm'})
        return attrs


class AnimalRemovalSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=Animal.REMOVAL_REASON_CHOICES)
    date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_date(self, value):
        if value > timezone.localdate():
            raise serializers.ValidationError('Removal date cannot be in the future')
        return value


class VaccinationSerializer(serializers.ModelSerializer):
    animal_code = serializers.CharField(source='animal.identification_code', read_only=True)

    class Meta:
        model = Vaccination
        fields = ['id', 'farm', 'animal', 'animal_code', 'vaccine_name', 'application_date',
                  'next_application_date', 'dose_number', 'batch_number', 'status', 'notes', 'applied_by',
                  'created_at', 'updated_at']
        read_only_fields = ['farm', 'animal', 'applied_by', 'created_at', 'updated_at']
        extra_kwargs = {'dose_number': {'min_value': 1}}

    def validate_vaccine_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Vaccine name is required')
        return value

    def validate(self, attrs):
        instance = self.instance
        application_date = attrs.get('application_date', instance.application_date if instance else None)
        next_date = attrs.get('next_application_date', instance.next_application_date if instance else None)
        status = attrs.get('status', instance.status if instance else Vaccination.COMPLETED)

        if next_date and application_date and next_date < application_date:
            raise serializers.ValidationError({'next_application_date': 'Next application cannot be before the application date'})
        if status == Vaccination.COMPLETED and application_date and application_date > timezone.localdate():
            raise serializers.ValidationError({'application_date': 'A completed vaccination cannot be dated in the future'})
        return attrs
