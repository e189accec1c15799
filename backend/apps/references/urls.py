from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ReferenceViewSet

router = SimpleRouter()
router.register(r'', ReferenceViewSet, basename='reference')

urlpatterns = [
    path('', include(router.urls)),
]
