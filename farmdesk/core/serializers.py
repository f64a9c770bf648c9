from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, AuditLog


def check_username_available(value, instance=None):
    """Usernames are unique regardless of case, matching the login lockout keys"""
    queryset = User.objects.filter(username__iexact=value)
    if instance is not None:
        queryset = queryset.exclude(pk=instance.pk)
    if queryset.exists():
        raise serializers.ValidationError("A user with that username already exists.")
    return value


class UserSerializer(serializers.ModelSerializer):
    is_super_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'name', 'first_name', 'last_name', 'phone', 'role', 'language',
                  'is_active', 'is_super_admin', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_username(self, value):
        return check_username_available(value, self.instance)


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'role']


class UserProfileSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own account"""

    class Meta:
        model = User
        fields = ['name', 'email', 'first_name', 'last_name', 'phone', 'language']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True, required=False)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'name', 'first_name', 'last_name',
                  'phone', 'language']

    def validate_username(self, value):
        return check_username_available(value)

    def validate(self, attrs):
        confirm = attrs.get('password_confirm')
        if confirm is not None and attrs['password'] != confirm:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm', None)
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.is_active = True
        user.set_password(password)
        user.save()
        return user


class AdminUserCreateSerializer(UserCreateSerializer):
    """User creation by a super admin, who may pick the role"""

    class Meta(UserCreateSerializer.Meta):
        fields = UserCreateSerializer.Meta.fields + ['role', 'is_active']


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect')
        return value

    def validate(self, attrs):
        validate_password(attrs['new_password'], user=self.context['request'].user)
        return attrs


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'farm_id', 'changes', 'ip_address', 'created_at']
