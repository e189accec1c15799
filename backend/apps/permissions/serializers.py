from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import AccessRight, PermissionAction, ProtectedResource, Role

User = get_user_model()


class PermissionListField(serializers.ListField):
    child = serializers.ChoiceField(choices=PermissionAction.choices)

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        # keep the first occurrence order, drop duplicates
        return list(dict.fromkeys(values))


class RoleSerializer(serializers.ModelSerializer):
    permissions = PermissionListField(required=False)

    class Meta:
        model = Role
        fields = ['id', 'name', 'description', 'permissions', 'is_active', 'company', 'created_at', 'updated_at']
        read_only_fields = ['company', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Role name is required")
        return value


class AccessRightSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    user_email = serializers.ReadOnlyField(source='user.email')
    resource = serializers.ChoiceField(choices=ProtectedResource.choices)
    permissions = PermissionListField(min_length=1)

    class Meta:
        model = AccessRight
        fields = [
            'id',
            'user',
            'user_email',
            'resource',
            'permissions',
            'is_active',
            'company',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['company', 'created_at', 'updated_at']
