from rest_framework import serializers

from .models import Document


class DocumentSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source='doc_id', read_only=True)
    url = serializers.CharField(read_only=True)
    relative_path = serializers.CharField(read_only=True)
    uploaded_by_email = serializers.EmailField(source='uploaded_by.email', read_only=True, default=None)

    class Meta:
        model = Document
        fields = [
            'id',
            'original_name',
            'file_name',
            'size',
            'content_type',
            'category',
            'reference',
            'uploaded_by',
            'uploaded_by_email',
            'uploaded_at',
            'relative_path',
            'url',
        ]
        read_only_fields = fields


class DocumentUploadSerializer(serializers.Serializer):
    """Form fields sent next to the ``file`` parts."""
    category = serializers.CharField(required=False, allow_blank=True, max_length=50)
    reference_id = serializers.IntegerField(required=False, allow_null=True)
