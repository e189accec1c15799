from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ClientViewSet, CountryViewSet, TechnologyViewSet

router = DefaultRouter()
router.register(r'clients', ClientViewSet, basename='client')
router.register(r'countries', CountryViewSet, basename='country')
router.register(r'technologies', TechnologyViewSet, basename='technology')

urlpatterns = [
    path('', include(router.urls)),
]
