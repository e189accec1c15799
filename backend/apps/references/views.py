import logging

from django.db.models import Count, Q
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.documents.models import Document
from apps.documents.serializers import DocumentSerializer
from apps.master_data.models import Client, Country, Technology
from shared.mixins import CompanyScopedQuerysetMixin
from shared.pagination import PageLimitPagination

from .filters import (
    ReferenceFilterSerializer,
    apply_filters,
    can_edit,
    can_view,
    ordering_from_params,
    visible_to,
)
from .models import Reference, ReferencePriority, ReferenceStatus
from .serializers import ReferenceSerializer

logger = logging.getLogger(__name__)


class ReferencePagination(PageLimitPagination):
    results_key = 'references'


class ReferenceAccess(permissions.BasePermission):
    """Object level read/edit rules for a single reference."""

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return can_view(request.user, obj)
        action = 'delete' if request.method == 'DELETE' else 'update'
        return can_edit(request.user, obj, action, view.get_company())


class ReferenceViewSet(CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    """
    References of the active company.

    Listings only ever contain what the caller may see; single lookups answer
    404 for unknown ids and 403 for references the caller may not see or edit.
    """
    queryset = Reference.objects.select_related('client', 'country', 'created_by').prefetch_related('technologies')
    serializer_class = ReferenceSerializer
    permission_classes = [permissions.IsAuthenticated, ReferenceAccess]
    pagination_class = ReferencePagination

    def visible_queryset(self):
        return visible_to(super().get_queryset(), self.request.user)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        params = self.request.query_params
        filters = ReferenceFilterSerializer.from_query_params(params)
        filters.is_valid(raise_exception=True)
        queryset = apply_filters(self.visible_queryset(), filters.validated_data)
        return queryset.order_by(*ordering_from_params(params))

    def perform_create(self, serializer):
        reference = serializer.save(company=self.get_company(), created_by=self.request.user)
        logger.info("Reference %s created by %s", reference.pk, self.request.user.pk)

    def perform_update(self, serializer):
        reference = serializer.save()
        logger.info("Reference %s updated by %s", reference.pk, self.request.user.pk)

    def destroy(self, request, *args, **kwargs):
        reference = self.get_object()
        reference_id = reference.pk
        reference.delete()
        logger.info("Reference %s deleted by %s", reference_id, request.user.pk)
        return Response({'success': True}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def search(self, request):
        filters = ReferenceFilterSerializer(data=request.data)
        filters.is_valid(raise_exception=True)
        queryset = apply_filters(self.visible_queryset(), filters.validated_data).order_by('-updated_at', '-id')
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        totals = self.visible_queryset().aggregate(
            total_references=Count('id'),
            completed_references=Count('id', filter=Q(status=ReferenceStatus.COMPLETED)),
            ongoing_references=Count('id', filter=Q(status=ReferenceStatus.IN_PROGRESS)),
            high_priority_references=Count('id', filter=Q(priority=ReferencePriority.HIGH)),
        )
        return Response(totals)

    @action(detail=False, methods=['get'], url_path='filter-options')
    def filter_options(self, request):
        visible = self.visible_queryset()

        def named(model, field):
            ids = visible.values(field)
            return list(model.objects.filter(pk__in=ids).order_by('name').values('id', 'name'))

        responsible = (
            visible.exclude(responsible='')
            .order_by('responsible')
            .values_list('responsible', flat=True)
            .distinct()
        )
        return Response({
            'clients': named(Client, 'client'),
            'countries': named(Country, 'country'),
            'technologies': named(Technology, 'technologies'),
            'responsible_persons': list(responsible),
        })

    @action(detail=True, methods=['get'])
    def documents(self, request, pk=None):
        reference = self.get_object()
        documents = Document.objects.filter(reference=reference).select_related('uploaded_by')
        category = request.query_params.get('category')
        if category:
            documents = documents.filter(category=category)
        return Response(DocumentSerializer(documents.order_by('-uploaded_at'), many=True).data)
