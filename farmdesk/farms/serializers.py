from rest_framework import serializers

from farmdesk.core.models import User
from farmdesk.core.serializers import UserSummarySerializer
from .models import Farm, UserFarm, UserPermission, SystemModule, AccessLevel


class FarmSerializer(serializers.ModelSerializer):
    admin = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True, required=False)
    admin_name = serializers.SerializerMethodField()
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Farm
        fields = ['id', 'name', 'location', 'size', 'farm_type', 'description', 'coordinates',
                  'admin', 'admin_name', 'created_by', 'member_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_admin_name(self, obj):
        return obj.admin.get_display_name() if obj.admin else None

    def get_member_count(self, obj):
        return obj.memberships.count()

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError('Farm name must have at least 2 characters')
        return value

    def validate_size(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Size cannot be negative')
        return value


class UserFarmSerializer(serializers.ModelSerializer):
    user_detail = UserSummarySerializer(source='user', read_only=True)

    class Meta:
        model = UserFarm
        fields = ['id', 'user', 'user_detail', 'farm', 'role', 'created_at']
        read_only_fields = ['user', 'farm', 'created_at']


class MembershipCreateSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    role = serializers.ChoiceField(choices=UserFarm.ROLE_CHOICES, default=UserFarm.MEMBER)
    apply_defaults = serializers.BooleanField(default=True)


class MembershipUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserFarm.ROLE_CHOICES)
    apply_defaults = serializers.BooleanField(default=False)


class UserPermissionSerializer(serializers.ModelSerializer):
    user_detail = UserSummarySerializer(source='user', read_only=True)

    class Meta:
        model = UserPermission
        fields = ['id', 'user', 'user_detail', 'farm', 'module', 'access_level', 'created_at', 'updated_at']
        read_only_fields = fields


class PermissionGrantSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    module = serializers.ChoiceField(choices=SystemModule.CHOICES)
    access_level = serializers.ChoiceField(choices=AccessLevel.CHOICES)
