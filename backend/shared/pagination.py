from __future__ import annotations

import math

from rest_framework import serializers
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class PageLimitPagination(BasePagination):
    """
    ``page``/``limit`` pagination that answers with a named result list and a
    ``pagination`` block::

        {"references": [...], "pagination": {"page": 1, "limit": 10, "total": 42, "pages": 5}}

    Pages past the end yield an empty list instead of a 404.
    """
    default_limit = 10
    max_limit = 100
    results_key = 'results'

    def _positive_int(self, request, name: str, default: int, cap: int | None = None) -> int:
        raw = request.query_params.get(name)
        if raw in (None, ''):
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise serializers.ValidationError({name: ['A valid integer is required.']})
        if value < 1:
            raise serializers.ValidationError({name: ['Ensure this value is greater than or equal to 1.']})
        if cap is not None:
            value = min(value, cap)
        return value

    def paginate_queryset(self, queryset, request, view=None):
        self.page = self._positive_int(request, 'page', 1)
        self.limit = self._positive_int(request, 'limit', self.default_limit, self.max_limit)
        self.total = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_pagination_block(self) -> dict:
        return {
            'page': self.page,
            'limit': self.limit,
            'total': self.total,
            'pages': math.ceil(self.total / self.limit) if self.limit else 0,
        }

    def get_paginated_response(self, data):
        return Response({self.results_key: data, 'pagination': self.get_pagination_block()})

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                self.results_key: schema,
                'pagination': {
                    'type': 'object',
                    'properties': {
                        'page': {'type': 'integer'},
                        'limit': {'type': 'integer'},
                        'total': {'type': 'integer'},
                        'pages': {'type': 'integer'},
                    },
                },
            },
        }
