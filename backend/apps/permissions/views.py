from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from shared.mixins import CompanyScopedQuerysetMixin, SoftDeleteMixin

from .drf_permissions import IsAdmin
from .models import AccessRight, Role
from .serializers import AccessRightSerializer, RoleSerializer

User = get_user_model()


class RoleViewSet(SoftDeleteMixin, CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    queryset = Role.objects.all().order_by('name')
    serializer_class = RoleSerializer
    permission_classes = [IsAuthenticated, IsAdmin]


class AccessRightViewSet(SoftDeleteMixin, CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    queryset = AccessRight.objects.select_related('user').order_by('-created_at')
    serializer_class = AccessRightSerializer
    permission_classes = [IsAuthenticated, IsAdmin]


class UserAccessRightsView(generics.ListAPIView):
    """Active access rights of one user; visible to that user and administrators."""
    serializer_class = AccessRightSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        target = get_object_or_404(User, pk=self.kwargs['user_id'])
        user = self.request.user
        if not getattr(user, 'is_admin', False) and target.pk != user.pk:
            raise PermissionDenied("You can only view your own access rights.")
        return AccessRight.objects.filter(user=target, is_active=True).order_by('-created_at')
