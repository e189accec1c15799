from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.test import APITestCase

from apps.companies.models import Company
from apps.users.models import UserRole
from shared.tenancy import resolve_company


User = get_user_model()


class ResolveCompanyTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.north = Company.objects.create(code="NORTH", name="North")
        self.south = Company.objects.create(code="SOUTH", name="South")
        self.user = User.objects.create_user(
            username="alice@example.com", email="alice@example.com", password="x", company=self.north
        )
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )

    def request(self, user, **headers):
        request = self.factory.get("/", **headers)
        request.user = user
        request.session = {}
        return request

    def test_defaults_to_user_company(self):
        self.assertEqual(resolve_company(self.request(self.user)), self.north)

    def test_header_wins_for_admins(self):
        request = self.request(self.admin, HTTP_X_COMPANY_ID=str(self.south.pk))
        self.assertEqual(resolve_company(request), self.south)

    def test_session_company_is_used_without_header(self):
        request = self.request(self.admin)
        request.session["active_company_id"] = self.north.pk
        self.assertEqual(resolve_company(request), self.north)

    def test_foreign_company_is_rejected_for_regular_users(self):
        request = self.request(self.user, HTTP_X_COMPANY_ID=str(self.south.pk))
        with self.assertRaises(PermissionDenied):
            resolve_company(request)

    def test_inactive_company_is_rejected(self):
        self.south.is_active = False
        self.south.save()
        request = self.request(self.admin, HTTP_X_COMPANY_ID=str(self.south.pk))
        with self.assertRaises(PermissionDenied):
            resolve_company(request)

    def test_result_is_cached_on_request(self):
        request = self.request(self.user)
        resolve_company(request)
        with self.assertNumQueries(0):
            self.assertEqual(resolve_company(request), self.north)


class CompanyAPITests(APITestCase):
    def setUp(self):
        self.north = Company.objects.create(code="NORTH", name="North")
        self.south = Company.objects.create(code="SOUTH", name="South")
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.user = User.objects.create_user(
            username="alice@example.com", email="alice@example.com", password="x", company=self.north
        )
        self.url = "/api/companies/"

    def test_regular_user_sees_own_company_only(self):
        self.client.force_authenticate(self.user)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c["code"] for c in response.data], ["NORTH"])

    def test_admin_sees_all_companies(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url)
        self.assertEqual([c["code"] for c in response.data], ["NORTH", "SOUTH"])

    def test_only_admins_create(self):
        self.client.force_authenticate(self.user)
        response = self.client.post(self.url, {"code": "west", "name": "West"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post(self.url, {"code": "west", "name": "West"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["code"], "WEST")

    def test_invalid_code_is_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(self.url, {"code": "no spaces", "name": "Bad"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("code", response.data)
