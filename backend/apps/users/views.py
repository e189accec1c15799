import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from apps.permissions.drf_permissions import IsAdmin
from shared.pagination import PageLimitPagination

from .models import UserRole
from .serializers import (
    ChangePasswordSerializer,
    ResetPasswordSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


class UserPagination(PageLimitPagination):
    results_key = 'users'


class UserViewSet(viewsets.ModelViewSet):
    """
    User administration. Listing, creation and account state changes are
    reserved to administrators; a regular user may read and edit only their
    own profile.
    """
    queryset = User.objects.all().order_by('name', 'email')
    pagination_class = UserPagination
    http_method_names = ['get', 'post', 'patch', 'put', 'head', 'options']

    admin_actions = {'list', 'create', 'reset_password', 'deactivate', 'activate', 'stats'}

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [permissions.IsAuthenticated(), IsAdmin()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        if self.action in ('update', 'partial_update'):
            return UserUpdateSerializer
        if self.action == 'change_password':
            return ChangePasswordSerializer
        if self.action == 'reset_password':
            return ResetPasswordSerializer
        return UserSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset
        params = self.request.query_params
        search = params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(email__icontains=search))
        role = params.get('role')
        if role:
            if role not in UserRole.values:
                raise ValidationError({'role': [f"Unknown role '{role}'."]})
            queryset = queryset.filter(role=role)
        return queryset

    def get_object(self):
        obj = super().get_object()
        user = self.request.user
        if not user.is_admin and obj.pk != user.pk:
            raise PermissionDenied("You can only access your own profile.")
        return obj

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("User %s created by %s", user.email, self.request.user.pk)

    def perform_update(self, serializer):
        user = serializer.save()
        logger.info("User %s updated by %s", user.pk, self.request.user.pk)

    @action(detail=False, methods=['get'])
    def me(self, request):
        return Response(UserSerializer(request.user, context=self.get_serializer_context()).data)

    @action(detail=False, methods=['post'], url_path='change-password')
    def change_password(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        logger.info("User %s changed their password", user.pk)
        return Response({'message': 'Password changed successfully'})

    @action(detail=True, methods=['post'], url_path='reset-password')
    def reset_password(self, request, pk=None):
        user = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        logger.info("Password of user %s reset by %s", user.pk, request.user.pk)
        return Response({'message': 'Password reset successfully'})

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise ValidationError({'detail': "You cannot deactivate your own account"})
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info("User %s deactivated by %s", user.pk, request.user.pk)
        return Response({'message': 'User deactivated successfully'})

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        user = self.get_object()
        user.is_active = True
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info("User %s activated by %s", user.pk, request.user.pk)
        return Response({'message': 'User activated successfully'})

    @action(detail=False, methods=['get'])
    def stats(self, request):
        users = User.objects.all()
        total = users.count()
        active = users.filter(is_active=True).count()
        admins = users.filter(is_active=True).filter(Q(role=UserRole.ADMIN) | Q(is_superuser=True)).count()
        return Response(
            {
                'total_users': total,
                'active_users': active,
                'admin_users': admins,
                'regular_users': active - admins,
            },
            status=status.HTTP_200_OK,
        )
