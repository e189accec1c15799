"""
Active company (tenant) resolution for a request.

Priority: ``X-Company-ID`` header > session ``active_company_id`` > the
user's own company. The result is cached on the underlying Django request so
the header is validated only once per request.
"""
from rest_framework.exceptions import PermissionDenied

from apps.companies.models import Company

_UNSET = object()


def _django_request(request):
    # DRF wraps the HttpRequest; attributes cached here survive across both
    return getattr(request, '_request', request)


def _lookup(company_id):
    try:
        return Company.objects.filter(pk=int(company_id), is_active=True).first()
    except (TypeError, ValueError):
        return None


def resolve_company(request):
    """Return the active Company for ``request`` or None."""
    raw = _django_request(request)
    cached = getattr(raw, '_resolved_company', _UNSET)
    if cached is not _UNSET:
        return cached

    user = getattr(request, 'user', None)
    company = None
    if user is not None and user.is_authenticated:
        header_id = raw.META.get('HTTP_X_COMPANY_ID')
        session = getattr(raw, 'session', None)
        session_id = session.get('active_company_id') if session is not None else None
        requested_id = header_id or session_id

        if requested_id:
            company = _lookup(requested_id)
            if company is None:
                raise PermissionDenied("Unknown or inactive company.")
            if not getattr(user, 'is_admin', False) and company.pk != user.company_id:
                raise PermissionDenied("You do not have access to this company.")
        elif user.company_id:
            company = _lookup(user.company_id)

    raw._resolved_company = company
    raw.company = company
    return company


def scope_to_request(queryset, request):
    """
    Narrow a company-aware queryset to what ``request`` may reach.

    With an active company only its records remain. Without one, administrators
    keep everything while other users only reach records outside any company.
    """
    company = resolve_company(request)
    if company is None and not getattr(request.user, 'is_admin', False):
        return queryset.filter(company__isnull=True)
    return queryset.for_company(company)
