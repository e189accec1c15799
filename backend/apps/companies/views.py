from rest_framework import permissions, viewsets

from apps.permissions.drf_permissions import IsAdminOrReadOnly

from .models import Company
from .serializers import CompanySerializer


class CompanyViewSet(viewsets.ModelViewSet):
    """
    Companies visible to the caller: administrators see every company,
    other users only their own. Writes are reserved to administrators.
    """
    serializer_class = CompanySerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrReadOnly]
    http_method_names = ['get', 'post', 'patch', 'put', 'head', 'options']

    def get_queryset(self):
        user = self.request.user
        queryset = Company.objects.all().order_by('name')
        if getattr(user, 'is_admin', False):
            return queryset
        return queryset.filter(pk=user.company_id, is_active=True)
