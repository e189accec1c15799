from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from apps.companies.models import Company
from apps.permissions.models import AccessRight, Role
from apps.permissions.permissions import grants, has_permission
from apps.users.models import UserRole


User = get_user_model()


class GrantsTests(TestCase):
    def test_exact_action(self):
        self.assertTrue(grants(["create"], "create"))
        self.assertFalse(grants(["create"], "delete"))

    def test_write_implies_crud(self):
        for action in ("read", "create", "update", "delete"):
            self.assertTrue(grants(["write"], action))

    def test_admin_implies_everything(self):
        self.assertTrue(grants(["admin"], "delete"))

    def test_read_does_not_imply_write(self):
        self.assertFalse(grants(["read"], "update"))


class HasPermissionTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="alice@example.com", email="alice@example.com", password="x")

    def test_admin_always_allowed(self):
        admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.assertTrue(has_permission(admin, "references", "delete"))

    def test_inactive_user_denied(self):
        AccessRight.objects.create(user=self.user, resource="references", permissions=["admin"])
        self.user.is_active = False
        self.assertFalse(has_permission(self.user, "references", "read"))

    def test_inactive_right_is_ignored(self):
        AccessRight.objects.create(user=self.user, resource="references", permissions=["update"], is_active=False)
        self.assertFalse(has_permission(self.user, "references", "update"))

    def test_right_is_bound_to_resource(self):
        AccessRight.objects.create(user=self.user, resource="masterData", permissions=["update"])
        self.assertFalse(has_permission(self.user, "references", "update"))
        self.assertTrue(has_permission(self.user, "masterData", "update"))

    def test_rights_of_other_companies_are_ignored(self):
        north = Company.objects.create(code="NORTH", name="North")
        south = Company.objects.create(code="SOUTH", name="South")
        AccessRight.objects.create(user=self.user, resource="references", permissions=["update"], company=south)
        self.assertFalse(has_permission(self.user, "references", "update", north))
        self.assertTrue(has_permission(self.user, "references", "update", south))
        self.assertFalse(has_permission(self.user, "references", "update"))


class RoleAPITests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.user = User.objects.create_user(username="alice@example.com", email="alice@example.com", password="x")
        self.url = "/api/roles/"

    def test_regular_user_is_forbidden(self):
        self.client.force_authenticate(self.user)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)

    def test_create_dedupes_permissions(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.url, {"name": " Editor ", "permissions": ["read", "write", "read"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "Editor")
        self.assertEqual(response.data["permissions"], ["read", "write"])

    def test_unknown_permission_is_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(self.url, {"name": "Bad", "permissions": ["fly"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_is_soft_and_hides_role_from_list(self):
        role = Role.objects.create(name="Viewer", permissions=["read"])
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f"{self.url}{role.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        role.refresh_from_db()
        self.assertFalse(role.is_active)
        self.assertEqual(self.client.get(self.url).data, [])


class AccessRightAPITests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.alice = User.objects.create_user(username="alice@example.com", email="alice@example.com", password="x")
        self.bob = User.objects.create_user(username="bob@example.com", email="bob@example.com", password="x")
        self.url = "/api/access-rights/"

    def test_admin_grants_right(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.url,
            {"user": self.alice.pk, "resource": "masterData", "permissions": ["create", "update"]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user_email"], "alice@example.com")
        self.assertTrue(has_permission(self.alice, "masterData", "create"))

    def test_empty_permissions_are_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.url, {"user": self.alice.pk, "resource": "masterData", "permissions": []}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_resource_is_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.url, {"user": self.alice.pk, "resource": "billing", "permissions": ["read"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_reads_own_rights(self):
        AccessRight.objects.create(user=self.alice, resource="references", permissions=["read"])
        AccessRight.objects.create(user=self.alice, resource="reports", permissions=["read"], is_active=False)
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}user/{self.alice.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["resource"] for r in response.data], ["references"])

    def test_user_cannot_read_others_rights(self):
        self.client.force_authenticate(self.bob)
        response = self.client.get(f"{self.url}user/{self.alice.pk}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_user(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(f"{self.url}user/99999/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
