from rest_framework import serializers
from .models import Crop


class CropSerializer(serializers.ModelSerializer):
    class Meta:
        model = Crop
        fields = ['id', 'farm', 'name', 'sector', 'area', 'planting_date', 'expected_harvest_date',
                  'actual_harvest_date', 'status', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'created_at', 'updated_at']

    def validate_area(self, value):
        if value <= 0:
            raise serializers.ValidationError('Area must be greater than zero')
        return value

    def validate(self, attrs):
        planting = attrs.get('planting_date', getattr(self.instance, 'planting_date', None))
        expected = attrs.get('expected_harvest_date', getattr(self.instance, 'expected_harvest_date', None))
        actual = attrs.get('actual_harvest_date', getattr(self.instance, 'actual_harvest_date', None))
        if planting and expected and expected < planting:
            raise serializers.ValidationError({'expected_harvest_date': 'Expected harvest date cannot be before planting date'})
        if planting and actual and actual < planting:
            raise serializers.ValidationError({'actual_harvest_date': 'Harvest date cannot be before planting date'})
        return attrs
