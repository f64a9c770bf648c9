from rest_framework import serializers
from .models import Cost


class CostSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cost
        fields = ['id', 'farm', 'date', 'category', 'amount', 'description', 'supplier', 'payment_method',
                  'document_number', 'notes', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'created_by', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero')
        return value

    def validate_description(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Description is required')
        return value
