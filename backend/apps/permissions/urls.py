from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import AccessRightViewSet, RoleViewSet, UserAccessRightsView

router = DefaultRouter()
router.register(r'roles', RoleViewSet, basename='role')
router.register(r'access-rights', AccessRightViewSet, basename='access-right')

urlpatterns = [
    path('access-rights/user/<int:user_id>/', UserAccessRightsView.as_view(), name='user-access-rights'),
    path('', include(router.urls)),
]
