from django.core.validators import MinLengthValidator
from django.db import models

from shared.models import CompanyAwareModel


class MasterDataModel(CompanyAwareModel):
    """Named lookup record that is soft deleted through ``is_active``."""
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class Client(MasterDataModel):
    description = models.TextField(blank=True)
    industry = models.CharField(max_length=255, blank=True)
    website = models.URLField(blank=True)
    country = models.CharField(max_length=255, blank=True)

    class Meta(MasterDataModel.Meta):
        db_table = 'clients'


class Country(MasterDataModel):
    code = models.CharField(max_length=3, blank=True, validators=[MinLengthValidator(2)])
    region = models.CharField(max_length=255, blank=True)

    class Meta(MasterDataModel.Meta):
        db_table = 'countries'
        verbose_name_plural = 'Countries'


class Technology(MasterDataModel):
    category = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    version = models.CharField(max_length=100, blank=True)

    class Meta(MasterDataModel.Meta):
        db_table = 'technologies'
        verbose_name_plural = 'Technologies'
