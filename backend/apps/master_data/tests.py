from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.companies.models import Company
from apps.master_data.models import Client, Country, Technology
from apps.permissions.models import AccessRight
from apps.users.models import UserRole


User = get_user_model()


class MasterDataAPITests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.user = User.objects.create_user(
            username="alice@example.com", email="alice@example.com", password="x"
        )
        self.clients_url = "/api/master-data/clients/"

    def test_list_shows_active_records_ordered_by_name(self):
        Client.objects.create(name="Zeta")
        Client.objects.create(name="Alpha")
        Client.objects.create(name="Gone", is_active=False)
        self.client.force_authenticate(self.user)
        response = self.client.get(self.clients_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c["name"] for c in response.data], ["Alpha", "Zeta"])

    def test_regular_user_cannot_create(self):
        self.client.force_authenticate(self.user)
        response = self.client.post(self.clients_url, {"name": "Acme"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_access_right_allows_create(self):
        AccessRight.objects.create(user=self.user, resource="masterData", permissions=["create"])
        self.client.force_authenticate(self.user)
        response = self.client.post(self.clients_url, {"name": "  Acme  "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "Acme")

    def test_create_only_right_does_not_allow_delete(self):
        acme = Client.objects.create(name="Acme")
        AccessRight.objects.create(user=self.user, resource="masterData", permissions=["create"])
        self.client.force_authenticate(self.user)
        response = self.client.delete(f"{self.clients_url}{acme.pk}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_write_right_implies_update(self):
        acme = Client.objects.create(name="Acme")
        AccessRight.objects.create(user=self.user, resource="masterData", permissions=["write"])
        self.client.force_authenticate(self.user)
        response = self.client.patch(
            f"{self.clients_url}{acme.pk}/", {"industry": "Energy"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        acme.refresh_from_db()
        self.assertEqual(acme.industry, "Energy")

    def test_admin_delete_is_soft(self):
        acme = Client.objects.create(name="Acme")
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f"{self.clients_url}{acme.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"success": True})
        acme.refresh_from_db()
        self.assertFalse(acme.is_active)

    def test_delete_unknown_returns_404(self):
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f"{self.clients_url}9999/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_client_website_must_be_url(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.clients_url, {"name": "Acme", "website": "not a url"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("website", response.data)

    def test_country_code_length_is_validated(self):
        self.client.force_authenticate(self.admin)
        url = "/api/master-data/countries/"
        self.assertEqual(
            self.client.post(url, {"name": "Mauritania", "code": "M"}, format="json").status_code,
            status.HTTP_400_BAD_REQUEST,
        )
        response = self.client.post(url, {"name": "Mauritania", "code": "mr"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Country.objects.get().code, "MR")

    def test_technology_crud(self):
        self.client.force_authenticate(self.admin)
        url = "/api/master-data/technologies/"
        response = self.client.post(
            url, {"name": "Django", "category": "Backend", "version": "5"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        tech = Technology.objects.get()
        response = self.client.get(f"{url}{tech.pk}/")
        self.assertEqual(response.data["category"], "Backend")

    def test_records_are_scoped_to_the_active_company(self):
        north = Company.objects.create(code="NORTH", name="North")
        south = Company.objects.create(code="SOUTH", name="South")
        Client.objects.create(name="North client", company=north)
        Client.objects.create(name="South client", company=south)
        self.user.company = north
        self.user.save()
        self.client.force_authenticate(self.user)

        response = self.client.get(self.clients_url)
        self.assertEqual([c["name"] for c in response.data], ["North client"])

        response = self.client.get(self.clients_url, HTTP_X_COMPANY_ID=str(south.pk))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_switches_company_with_header(self):
        south = Company.objects.create(code="SOUTH", name="South")
        Client.objects.create(name="South client", company=south)
        Client.objects.create(name="Shared client")
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.clients_url, HTTP_X_COMPANY_ID=str(south.pk))
        self.assertEqual([c["name"] for c in response.data], ["South client"])

    def test_created_records_are_stamped_with_company(self):
        north = Company.objects.create(code="NORTH", name="North")
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            self.clients_url, {"name": "Acme"}, format="json", HTTP_X_COMPANY_ID=str(north.pk)
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["company"], north.pk)

    def test_user_without_company_only_sees_shared_records(self):
        south = Company.objects.create(code="SOUTH", name="South")
        Client.objects.create(name="South client", company=south)
        Client.objects.create(name="Shared client")
        self.client.force_authenticate(self.user)
        response = self.client.get(self.clients_url)
        self.assertEqual([c["name"] for c in response.data], ["Shared client"])
