"""
Visibility and search rules for references.

Every listing goes through ``visible_to`` first; search filters only ever
narrow the visible set further.
"""
from django.db.models import Q
from rest_framework import serializers

from apps.permissions.models import ProtectedResource
from apps.permissions.permissions import has_permission

from .models import ReferencePriority, ReferenceStatus

SORTABLE_FIELDS = (
    'created_at',
    'updated_at',
    'title',
    'start_date',
    'end_date',
    'status',
    'priority',
    'employees_involved',
)


def visibility_q(user) -> Q:
    return (
        Q(status=ReferenceStatus.COMPLETED)
        | Q(responsible__iexact=user.email)
        | Q(created_by=user)
    )


def visible_to(queryset, user):
    """References ``user`` may read: everything for admins, otherwise completed, owned or created ones."""
    if getattr(user, 'is_admin', False):
        return queryset
    return queryset.filter(visibility_q(user))


def can_view(user, reference) -> bool:
    if getattr(user, 'is_admin', False):
        return True
    return (
        reference.status == ReferenceStatus.COMPLETED
        or is_responsible(user, reference)
        or (reference.created_by_id is not None and reference.created_by_id == user.pk)
    )


def is_responsible(user, reference) -> bool:
    return bool(user.email) and reference.responsible.lower() == user.email.lower()


def can_edit(user, reference, action: str, company=None) -> bool:
    if getattr(user, 'is_admin', False):
        return True
    if is_responsible(user, reference):
        return True
    if reference.created_by_id is not None and reference.created_by_id == user.pk:
        return True
    return has_permission(user, ProtectedResource.REFERENCES, action, company)


class ReferenceFilterSerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True)
    client = serializers.IntegerField(required=False, min_value=1)
    country = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=ReferenceStatus.choices, required=False)
    priority = serializers.ChoiceField(choices=ReferencePriority.choices, required=False)
    responsible = serializers.CharField(required=False, allow_blank=True)
    technologies = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    @classmethod
    def from_query_params(cls, params):
        """Build the serializer from a QueryDict; technologies may repeat or be comma separated."""
        data = {}
        for name, field in cls().fields.items():
            if isinstance(field, serializers.ListField):
                values = []
                for raw in params.getlist(name):
                    values.extend(item for item in raw.split(',') if item.strip())
                if values:
                    data[name] = values
            elif params.get(name) not in (None, ''):
                data[name] = params.get(name)
        return cls(data=data)


def apply_filters(queryset, filters: dict):
    """Narrow ``queryset`` with validated filter values (all conditions are ANDed)."""
    query = (filters.get('query') or '').strip()
    needs_distinct = False
    if query:
        queryset = queryset.filter(
            Q(title__icontains=query)
            | Q(description__icontains=query)
            | Q(client__name__icontains=query)
            | Q(keywords_text__contains=query.lower())
            | Q(technologies__name__icontains=query)
        )
        needs_distinct = True

    if filters.get('client'):
        queryset = queryset.filter(client_id=filters['client'])
    if filters.get('country'):
        queryset = queryset.filter(country_id=filters['country'])
    if filters.get('status'):
        queryset = queryset.filter(status=filters['status'])
    if filters.get('priority'):
        queryset = queryset.filter(priority=filters['priority'])
    responsible = (filters.get('responsible') or '').strip()
    if responsible:
        queryset = queryset.filter(responsible__iexact=responsible)
    if filters.get('technologies'):
        queryset = queryset.filter(technologies__in=filters['technologies'])
        needs_distinct = True
    if filters.get('start_date'):
        queryset = queryset.filter(start_date__gte=filters['start_date'])
    if filters.get('end_date'):
        queryset = queryset.filter(end_date__lte=filters['end_date'])

    return queryset.distinct() if needs_distinct else queryset


def ordering_from_params(params) -> list:
    sort_by = params.get('sort_by') or 'created_at'
    sort_order = (params.get('sort_order') or 'desc').lower()
    if sort_by not in SORTABLE_FIELDS:
        raise serializers.ValidationError(
            {'sort_by': [f"Unsupported sort field '{sort_by}'. Use one of: {', '.join(SORTABLE_FIELDS)}."]}
        )
    if sort_order not in ('asc', 'desc'):
        raise serializers.ValidationError({'sort_order': ["Use 'asc' or 'desc'."]})
    prefix = '-' if sort_order == 'desc' else ''
    return [f'{prefix}{sort_by}', f'{prefix}id']
