from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import UserRole


User = get_user_model()


class TokenLoginTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="alice@example.com",
            email="alice@example.com",
            password="pass12345",
            name="Alice",
        )
        self.url = "/api/auth/token/"

    def test_login_with_email(self):
        response = self.client.post(
            self.url, {"email": "Alice@Example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["email"], "alice@example.com")

    def test_login_with_username_alias(self):
        response = self.client.post(
            self.url, {"login": "alice@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password_is_rejected(self):
        response = self.client.post(
            self.url, {"email": "alice@example.com", "password": "wrong"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post(
            self.url, {"email": "alice@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates_api_calls(self):
        tokens = self.client.post(
            self.url, {"email": "alice@example.com", "password": "pass12345"}, format="json"
        ).data
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = self.client.get("/api/users/me/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], self.user.pk)

    def test_unauthenticated_request_is_rejected(self):
        response = self.client.get("/api/users/me/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RegisterTests(APITestCase):
    url = "/api/auth/register/"

    def test_register_creates_regular_user(self):
        payload = {"name": "Carol", "email": "carol@example.com", "password": "secret"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "User created successfully")
        user = User.objects.get(pk=response.data["user_id"])
        self.assertEqual(user.role, UserRole.USER)
        self.assertTrue(user.check_password("secret"))

    def test_register_duplicate_email(self):
        User.objects.create_user(username="carol@example.com", email="carol@example.com", password="x")
        payload = {"name": "Carol", "email": "carol@example.com", "password": "secret"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data["email"][0]), "User already exists")

    def test_register_requires_six_character_password(self):
        payload = {"name": "Carol", "email": "carol@example.com", "password": "abc"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data)
