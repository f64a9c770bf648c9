from rest_framework import serializers

from farmdesk.core.models import User
from farmdesk.crops.models import Crop
from farmdesk.farms.access import is_farm_member
from .models import CalendarEvent, Goal


class CalendarEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = CalendarEvent
        fields = ['id', 'farm', 'title', 'description', 'date', 'end_date', 'all_day', 'event_type',
                  'created_by', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'created_by', 'created_at', 'updated_at']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required')
        return value

    def validate(self, attrs):
        start = attrs.get('date', getattr(self.instance, 'date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date'})
        return attrs


class GoalSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True, required=False)
    crop = serializers.PrimaryKeyRelatedField(queryset=Crop.objects.all(), allow_null=True, required=False)
    assigned_to_name = serializers.SerializerMethodField()
    crop_name = serializers.SerializerMethodField()
    progress = serializers.IntegerField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Goal
        fields = ['id', 'farm', 'name', 'description', 'assigned_to', 'assigned_to_name', 'start_date', 'end_date',
                  'target_value', 'actual_value', 'unit', 'status', 'crop', 'crop_name', 'notes', 'progress',
                  'is_overdue', 'completion_date', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['farm', 'completion_date', 'created_by', 'created_at', 'updated_at']

    def get_assigned_to_name(self, obj):
        return obj.assigned_to.get_display_name() if obj.assigned_to else None

    def get_crop_name(self, obj):
        return obj.crop.name if obj.crop else None

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 3:
            raise serializers.ValidationError('Name must have at least 3 characters')
        return value

    def validate_target_value(self, value):
        if value <= 0:
            raise serializers.ValidationError('Target value must be greater than zero')
        return value

    def validate_actual_value(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Actual value cannot be negative')
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date'})

        farm = self.context.get('farm') or (self.instance.farm if self.instance else None)
        crop = attrs.get('crop')
        if farm is not None and crop is not None and crop.farm_id != farm.pk:
            raise serializers.ValidationError({'crop': 'Crop does not belong to this farm'})
        assignee = attrs.get('assigned_to')
        if farm is not None and assignee is not None and not is_farm_member(assignee, farm):
            raise serializers.ValidationError({'assigned_to': 'Assigned user is not a member of this farm'})
        return attrs
