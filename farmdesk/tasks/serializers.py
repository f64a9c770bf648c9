from rest_framework import serializers

from farmdesk.core.models import User
from farmdesk.farms.access import is_farm_member
from .models import Task


class TaskSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True, required=False)
    assigned_to_name = serializers.SerializerMethodField()
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'farm', 'title', 'description', 'due_date', 'status', 'priority', 'assigned_to',
                  'assigned_to_name', 'category', 'related_id', 'completed_at', 'is_overdue', 'created_by',
                  'created_at', 'updated_at']
        read_only_fields = ['farm', 'completed_at', 'created_by', 'created_at', 'updated_at']

    def get_assigned_to_name(self, obj):
        return obj.assigned_to.get_display_name() if obj.assigned_to else None

    def validate_title(self, value):
        value = value.strip()
        if len(value) < 3:
            raise serializers.ValidationError('Title must have at least 3 characters')
        return value

    def validate(self, attrs):
        farm = self.context.get('farm') or (self.instance.farm if self.instance else None)
        assignee = attrs.get('assigned_to')
        if farm is not None and assignee is not None and not is_farm_member(assignee, farm):
            raise serializers.ValidationError({'assigned_to': 'Assigned user is not a member of this farm'})
        return attrs
