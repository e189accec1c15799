from rest_framework import serializers

from apps.master_data.models import Client, Country, Technology
from shared.tenancy import scope_to_request

from .models import Reference


class ReferenceSerializer(serializers.ModelSerializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    country = serializers.PrimaryKeyRelatedField(queryset=Country.objects.all())
    technologies = serializers.PrimaryKeyRelatedField(
        queryset=Technology.objects.all(), many=True, allow_empty=True
    )
    client_name = serializers.CharField(source='client.name', read_only=True)
    country_name = serializers.CharField(source='country.name', read_only=True)
    technology_names = serializers.SerializerMethodField()
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True, default=None)
    keywords = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    screenshots = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    other_documents = serializers.ListField(child=serializers.CharField(max_length=500), required=False)

    class Meta:
        model = Reference
        fields = [
            'id',
            'title',
            'description',
            'client',
            'client_name',
            'country',
            'country_name',
            'location',
            'employees_involved',
            'budget',
            'status',
            'priority',
            'responsible',
            'start_date',
            'end_date',
            'technologies',
            'technology_names',
            'keywords',
            'screenshots',
            'completion_certificate',
            'other_documents',
            'created_by',
            'created_by_email',
            'company',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['created_by', 'company', 'created_at', 'updated_at']

    def get_fields(self):
        fields = super().get_fields()
        request = self.context.get('request')
        if request is not None:
            # only active master data of the caller's company can be linked
            fields['client'].queryset = scope_to_request(Client.objects.active(), request)
            fields['country'].queryset = scope_to_request(Country.objects.active(), request)
            fields['technologies'].child_relation.queryset = scope_to_request(Technology.objects.active(), request)
        return fields

    def get_technology_names(self, obj):
        return [tech.name for tech in obj.technologies.all()]

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_responsible(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Responsible person is required")
        return value

    def validate_technologies(self, value):
        if not value:
            raise serializers.ValidationError("At least one technology is required")
        return value

    def validate_keywords(self, value):
        return [keyword.strip() for keyword in value if keyword.strip()]

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': ["End date cannot be before the start date"]})
        return attrs
