from rest_framework import serializers

from .models import Client, Country, Technology

READ_ONLY = ['company', 'created_at', 'updated_at']


class NameStrippingMixin:
    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value


class ClientSerializer(NameStrippingMixin, serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ['id', 'name', 'description', 'industry', 'website', 'country', 'is_active',
                  'company', 'created_at', 'updated_at']
        read_only_fields = READ_ONLY


class CountrySerializer(NameStrippingMixin, serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = ['id', 'name', 'code', 'region', 'is_active', 'company', 'created_at', 'updated_at']
        read_only_fields = READ_ONLY

    def validate_code(self, value):
        return value.strip().upper()


class TechnologySerializer(NameStrippingMixin, serializers.ModelSerializer):
    class Meta:
        model = Technology
        fields = ['id', 'name', 'category', 'description', 'version', 'is_active',
                  'company', 'created_at', 'updated_at']
        read_only_fields = READ_ONLY
