import logging

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import PermissionDenied

from shared.tenancy import resolve_company

logger = logging.getLogger(__name__)


class CompanyContextMiddleware(MiddlewareMixin):
    """
    Injects the active company into session-authenticated requests.

    Token-authenticated API calls only know their user once DRF has run the
    authenticators, so views call ``resolve_company`` themselves; the
    middleware just makes sure ``request.company`` always exists.
    """
    def process_request(self, request):
        request.company = None
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        try:
            resolve_company(request)
        except PermissionDenied as exc:
            logger.warning("Rejected company context for user %s: %s", user.pk, exc.detail)
            return JsonResponse({'detail': str(exc.detail)}, status=403)
        return None
