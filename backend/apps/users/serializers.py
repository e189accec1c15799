from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import serializers

from shared.exceptions import Conflict

from .models import UserRole

User = get_user_model()

USER_FIELDS = (
    'id',
    'email',
    'name',
    'role',
    'department',
    'position',
    'company',
    'is_active',
    'email_verified_at',
    'last_login',
    'created_at',
    'updated_at',
)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = USER_FIELDS
        read_only_fields = ('email_verified_at', 'last_login', 'created_at', 'updated_at')


class UserCreateSerializer(serializers.ModelSerializer):
    """Administrator-side account creation; the address counts as verified."""
    password = serializers.CharField(write_only=True, min_length=8, style={'input_type': 'password'})
    # uniqueness is reported as 409 by validate_email
    email = serializers.EmailField()

    class Meta:
        model = User
        fields = USER_FIELDS + ('password',)
        read_only_fields = ('email_verified_at', 'last_login', 'created_at', 'updated_at')

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise Conflict("User with this email already exists")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        validated_data.setdefault('email_verified_at', timezone.now())
        return User.objects.create_user(
            username=validated_data['email'],
            password=password,
            **validated_data,
        )


class UserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = USER_FIELDS
        read_only_fields = ('email', 'email_verified_at', 'last_login', 'created_at', 'updated_at')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get('request')
        if request is None or not getattr(request.user, 'is_admin', False):
            # only administrators change roles, companies or activation
            for name in ('role', 'company', 'is_active'):
                self.fields[name].read_only = True


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6, style={'input_type': 'password'})

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User already exists")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            role=UserRole.USER,
        )


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8)
    confirm_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect")
        return value

    def validate(self, attrs):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': ["Passwords don't match"]})
        return attrs


class ResetPasswordSerializer(serializers.Serializer):
    new_password = serializers.CharField(write_only=True, min_length=8)
