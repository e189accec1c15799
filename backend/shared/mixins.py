import logging

from rest_framework import status
from rest_framework.response import Response

from shared.tenancy import resolve_company, scope_to_request

logger = logging.getLogger(__name__)


class CompanyScopedQuerysetMixin:
    """Narrow querysets to the active company and stamp new records with it."""

    def get_company(self):
        return resolve_company(self.request)

    def get_queryset(self):  # type: ignore[override]
        return scope_to_request(super().get_queryset(), self.request)

    def perform_create(self, serializer):
        serializer.save(company=self.get_company())


class SoftDeleteMixin:
    """
    ``DELETE`` deactivates the record instead of removing the row.
    Listing shows active records only; lookups still reach inactive ones.
    """

    def get_queryset(self):  # type: ignore[override]
        queryset = super().get_queryset()
        if self.action == 'list':
            queryset = queryset.active()
        return queryset

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])
        logger.info("Deactivated %s %s", instance._meta.label, instance.pk)
        return Response({'success': True}, status=status.HTTP_200_OK)
