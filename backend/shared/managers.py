from django.db import models


class CompanyQuerySet(models.QuerySet):
    def for_company(self, company):
        """Filter by company; no company means no tenant narrowing."""
        if company is None:
            return self
        return self.filter(company=company)

    def active(self):
        """Records that have not been soft deleted"""
        return self.filter(is_active=True)


class CompanyManager(models.Manager.from_queryset(CompanyQuerySet)):
    pass
