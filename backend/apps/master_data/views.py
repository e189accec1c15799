from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from apps.permissions.drf_permissions import HasAccessRight
from apps.permissions.models import ProtectedResource
from shared.mixins import CompanyScopedQuerysetMixin, SoftDeleteMixin

from .models import Client, Country, Technology
from .serializers import ClientSerializer, CountrySerializer, TechnologySerializer


class MasterDataViewSet(SoftDeleteMixin, CompanyScopedQuerysetMixin, viewsets.ModelViewSet):
    """
    Lookup lists shared by every reference. Anyone signed in may read them;
    writes need an administrator or a ``masterData`` access right.
    """
    permission_classes = [IsAuthenticated, HasAccessRight]
    access_resource = ProtectedResource.MASTER_DATA


class ClientViewSet(MasterDataViewSet):
    queryset = Client.objects.all().order_by('name')
    serializer_class = ClientSerializer


class CountryViewSet(MasterDataViewSet):
    queryset = Country.objects.all().order_by('name')
    serializer_class = CountrySerializer


class TechnologyViewSet(MasterDataViewSet):
    queryset = Technology.objects.all().order_by('name')
    serializer_class = TechnologySerializer
