import tempfile
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.test import APIClient, APIRequestFactory

from apps.companies.models import Company
from shared.pagination import PageLimitPagination


class HealthCheckTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_healthy(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "ok")
        self.assertEqual(response.data["database"]["details"]["default"], "connected")
        self.assertEqual(response.data["application"]["name"], "reference-manager")

    def test_degraded_when_database_fails(self):
        with mock.patch("shared.views.connections") as connections:
            connections.__iter__.return_value = iter(["default"])
            connections.__getitem__.return_value.cursor.side_effect = DatabaseError("unreachable")
            response = self.client.get("/health/")
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["status"], "degraded")

    def test_degraded_when_media_root_is_read_only(self):
        with tempfile.TemporaryDirectory() as media_root, override_settings(MEDIA_ROOT=media_root):
            with mock.patch("shared.views.os.access", return_value=False):
                response = self.client.get("/health/")
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["media"]["state"], "read-only")


class PageLimitPaginationTests(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        for index in range(7):
            Company.objects.create(code=f"C{index}", name=f"Company {index}")
        self.queryset = Company.objects.order_by("code")

    def paginate(self, **params):
        paginator = PageLimitPagination()
        request = Request(self.factory.get("/", params))
        page = paginator.paginate_queryset(self.queryset, request)
        return paginator, page

    def test_defaults(self):
        paginator, page = self.paginate()
        self.assertEqual(len(page), 7)
        self.assertEqual(paginator.get_pagination_block(), {"page": 1, "limit": 10, "total": 7, "pages": 1})

    def test_second_page(self):
        paginator, page = self.paginate(page=2, limit=3)
        self.assertEqual([c.code for c in page], ["C3", "C4", "C5"])
        self.assertEqual(paginator.get_pagination_block()["pages"], 3)

    def test_response_uses_results_key(self):
        paginator, page = self.paginate(limit=2)
        paginator.results_key = "companies"
        response = paginator.get_paginated_response([c.code for c in page])
        self.assertEqual(response.data["companies"], ["C0", "C1"])

    def test_rejects_non_positive_values(self):
        with self.assertRaises(ValidationError):
            self.paginate(page=0)
        with self.assertRaises(ValidationError):
            self.paginate(limit="abc")
