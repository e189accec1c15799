from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.references.filters import can_view, is_responsible
from apps.references.models import Reference
from shared.tenancy import resolve_company, scope_to_request

from .models import Document
from .serializers import DocumentSerializer, DocumentUploadSerializer
from .services.uploads import delete_document, handle_upload


class DocumentUploadView(APIView):
    """Multipart upload of one or more ``file`` parts."""
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        form = DocumentUploadSerializer(data={
            key: request.data.get(key) for key in ('category', 'reference_id') if request.data.get(key) not in (None, '')
        })
        form.is_valid(raise_exception=True)
        company = resolve_company(request)

        reference = None
        reference_id = form.validated_data.get('reference_id')
        if reference_id is not None:
            reference = scope_to_request(Reference.objects.all(), request).filter(pk=reference_id).first()
            if reference is None:
                raise ValidationError({'error': f"Reference {reference_id} does not exist"})
            if not can_view(request.user, reference):
                raise PermissionDenied("You cannot attach documents to this reference.")

        payload = handle_upload(
            request.FILES.getlist('file'),
            form.validated_data.get('category'),
            request.user,
            reference=reference,
            company=company,
        )
        return Response(payload, status=status.HTTP_200_OK)


class DocumentDetailView(APIView):
    """Metadata lookup and deletion by public document id."""
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self, doc_id):
        queryset = scope_to_request(Document.objects.select_related('reference', 'uploaded_by'), self.request)
        return get_object_or_404(queryset, doc_id=doc_id)

    def get(self, request, doc_id):
        document = self.get_object(doc_id)
        user = request.user
        allowed = (
            user.is_admin
            or document.uploaded_by_id == user.pk
            or (document.reference is not None and can_view(user, document.reference))
        )
        if not allowed:
            raise PermissionDenied("You do not have access to this document.")
        return Response(DocumentSerializer(document).data)

    def delete(self, request, doc_id):
        document = self.get_object(doc_id)
        user = request.user
        allowed = (
            user.is_admin
            or document.uploaded_by_id == user.pk
            or (document.reference is not None and is_responsible(user, document.reference))
        )
        if not allowed:
            raise PermissionDenied("You do not have permission to delete this document.")
        delete_document(document)
        return Response({'success': True, 'message': 'Document deleted successfully'})
