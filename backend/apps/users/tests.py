from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import UserRole


User = get_user_model()


def make_user(email, role=UserRole.USER, password="pass12345", **extra):
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        role=role,
        name=extra.pop("name", email.split("@")[0].title()),
        **extra,
    )


class UserAdministrationAPITests(APITestCase):
    def setUp(self):
        self.admin = make_user("admin@example.com", role=UserRole.ADMIN, name="Admin")
        self.alice = make_user("alice@example.com", name="Alice")
        self.bob = make_user("bob@example.com", name="Bob")
        self.url = "/api/users/"

    def test_list_requires_admin(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_is_paginated_and_ordered_by_name(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url, {"limit": 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u["name"] for u in response.data["users"]], ["Admin", "Alice"])
        self.assertEqual(
            response.data["pagination"], {"page": 1, "limit": 2, "total": 3, "pages": 2}
        )

    def test_list_search_and_role_filter(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url, {"search": "BOB"})
        self.assertEqual([u["email"] for u in response.data["users"]], ["bob@example.com"])

        response = self.client.get(self.url, {"role": "admin"})
        self.assertEqual([u["email"] for u in response.data["users"]], ["admin@example.com"])

    def test_password_is_never_serialized(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(f"{self.url}{self.alice.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn("password", response.data)

    def test_retrieve_other_user_forbidden_for_non_admin(self):
        self.client.force_authenticate(self.alice)
        self.assertEqual(
            self.client.get(f"{self.url}{self.bob.pk}/").status_code, status.HTTP_403_FORBIDDEN
        )
        self.assertEqual(
            self.client.get(f"{self.url}{self.alice.pk}/").status_code, status.HTTP_200_OK
        )

    def test_retrieve_missing_user_returns_404(self):
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(f"{self.url}9999/").status_code, status.HTTP_404_NOT_FOUND)

    def test_me_returns_current_profile(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}me/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "alice@example.com")

    def test_admin_creates_verified_user(self):
        self.client.force_authenticate(self.admin)
        payload = {"email": "carol@example.com", "name": "Carol", "password": "longenough"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        carol = User.objects.get(email="carol@example.com")
        self.assertIsNotNone(carol.email_verified_at)
        self.assertTrue(carol.check_password("longenough"))
        self.assertEqual(carol.role, UserRole.USER)

    def test_create_duplicate_email_conflicts(self):
        self.client.force_authenticate(self.admin)
        payload = {"email": "alice@example.com", "name": "Alice 2", "password": "longenough"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["detail"], "User with this email already exists")

    def test_create_rejects_short_password(self):
        self.client.force_authenticate(self.admin)
        payload = {"email": "dave@example.com", "name": "Dave", "password": "short"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data)

    def test_non_admin_cannot_promote_themselves(self):
        self.client.force_authenticate(self.alice)
        response = self.client.patch(
            f"{self.url}{self.alice.pk}/", {"role": "admin", "department": "R&D"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.role, UserRole.USER)
        self.assertEqual(self.alice.department, "R&D")

    def test_non_admin_cannot_edit_others(self):
        self.client.force_authenticate(self.alice)
        response = self.client.patch(f"{self.url}{self.bob.pk}/", {"name": "Robert"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_can_change_role(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch(f"{self.url}{self.bob.pk}/", {"role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bob.refresh_from_db()
        self.assertTrue(self.bob.is_admin)

    def test_deactivate_and_activate(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(f"{self.url}{self.bob.pk}/deactivate/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bob.refresh_from_db()
        self.assertFalse(self.bob.is_active)

        response = self.client.post(f"{self.url}{self.bob.pk}/activate/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bob.refresh_from_db()
        self.assertTrue(self.bob.is_active)

    def test_admin_cannot_deactivate_self(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(f"{self.url}{self.admin.pk}/deactivate/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "You cannot deactivate your own account")

    def test_reset_password(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            f"{self.url}{self.bob.pk}/reset-password/", {"new_password": "brandnew123"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.bob.refresh_from_db()
        self.assertTrue(self.bob.check_password("brandnew123"))

    def test_stats(self):
        self.bob.is_active = False
        self.bob.save()
        self.client.force_authenticate(self.admin)
        response = self.client.get(f"{self.url}stats/")
        self.assertEqual(
            response.data,
            {"total_users": 3, "active_users": 2, "admin_users": 1, "regular_users": 1},
        )


class ChangePasswordAPITests(APITestCase):
    def setUp(self):
        self.user = make_user("alice@example.com", password="oldpassword")
        self.client.force_authenticate(self.user)
        self.url = "/api/users/change-password/"

    def test_change_password(self):
        payload = {
            "current_password": "oldpassword",
            "new_password": "newpassword",
            "confirm_password": "newpassword",
        }
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("newpassword"))

    def test_wrong_current_password(self):
        payload = {
            "current_password": "nope",
            "new_password": "newpassword",
            "confirm_password": "newpassword",
        }
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data["current_password"][0]), "Current password is incorrect")

    def test_confirmation_mismatch(self):
        payload = {
            "current_password": "oldpassword",
            "new_password": "newpassword",
            "confirm_password": "otherpassword",
        }
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("confirm_password", response.data)


class CreateAdminCommandTests(APITestCase):
    def test_creates_admin(self):
        out = StringIO()
        call_command("create_admin", email="root@example.com", password="secret123", stdout=out)
        user = User.objects.get(email="root@example.com")
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password("secret123"))
        self.assertIsNotNone(user.email_verified_at)

    def test_promotes_existing_account(self):
        existing = make_user("root@example.com")
        call_command("create_admin", email="root@example.com", stdout=StringIO())
        existing.refresh_from_db()
        self.assertEqual(existing.role, UserRole.ADMIN)
        self.assertEqual(User.objects.filter(email="root@example.com").count(), 1)
