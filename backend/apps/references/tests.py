from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.companies.models import Company
from apps.documents.models import Document
from apps.master_data.models import Client, Country, Technology
from apps.permissions.models import AccessRight
from apps.references.models import Reference
from apps.users.models import UserRole


User = get_user_model()


class ReferenceFixtureMixin:
    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.alice = User.objects.create_user(
            username="alice@example.com", email="alice@example.com", password="x", name="Alice"
        )
        self.bob = User.objects.create_user(
            username="bob@example.com", email="bob@example.com", password="x", name="Bob"
        )
        self.acme = Client.objects.create(name="Acme Mining")
        self.globex = Client.objects.create(name="Globex")
        self.mauritania = Country.objects.create(name="Mauritania", code="MR")
        self.senegal = Country.objects.create(name="Senegal", code="SN")
        self.django = Technology.objects.create(name="Django")
        self.react = Technology.objects.create(name="React")
        self.url = "/api/references/"

    def make_reference(self, **overrides):
        technologies = overrides.pop("technologies", [self.django])
        values = {
            "title": "ERP rollout",
            "description": "Deployment of an ERP",
            "client": self.acme,
            "country": self.mauritania,
            "employees_involved": 5,
            "status": "Completed",
            "priority": "Medium",
            "responsible": "bob@example.com",
            "start_date": date(2023, 1, 1),
            "end_date": date(2023, 6, 30),
        }
        values.update(overrides)
        reference = Reference.objects.create(**values)
        reference.technologies.set(technologies)
        return reference

    def payload(self, **overrides):
        data = {
            "title": "Data platform",
            "description": "Analytics stack",
            "client": self.acme.pk,
            "country": self.mauritania.pk,
            "employees_involved": 3,
            "status": "En cours",
            "priority": "High",
            "responsible": "alice@example.com",
            "start_date": "2024-01-01",
            "end_date": "2024-12-31",
            "technologies": [self.django.pk],
            "keywords": ["analytics", " bi "],
        }
        data.update(overrides)
        return data


class ReferenceVisibilityTests(ReferenceFixtureMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.completed = self.make_reference(title="Completed project")
        self.alices = self.make_reference(title="Alice ongoing", status="En cours", responsible="alice@example.com")
        self.bobs = self.make_reference(title="Bob ongoing", status="En cours", responsible="bob@example.com")
        self.created_by_alice = self.make_reference(
            title="Created by Alice", status="En cours", responsible="carol@example.com", created_by=self.alice
        )

    def titles(self, response, key="references"):
        return sorted(ref["title"] for ref in response.data[key])

    def test_admin_sees_everything(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pagination"]["total"], 4)

    def test_user_sees_completed_owned_and_created(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(self.url)
        self.assertEqual(
            self.titles(response), ["Alice ongoing", "Completed project", "Created by Alice"]
        )

    def test_query_does_not_widen_visibility(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(self.url, {"query": "Bob"})
        self.assertEqual(response.data["references"], [])

    def test_search_endpoint_respects_visibility(self):
        self.client.force_authenticate(self.alice)
        response = self.client.post(f"{self.url}search/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            sorted(r["title"] for r in response.data),
            ["Alice ongoing", "Completed project", "Created by Alice"],
        )

    def test_creator_can_update_and_delete(self):
        self.client.force_authenticate(self.alice)
        url = f"{self.url}{self.created_by_alice.pk}/"
        response = self.client.patch(url, {"title": "Renamed by creator"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "Renamed by creator")
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Reference.objects.filter(pk=self.created_by_alice.pk).exists())

    def test_retrieve_hidden_reference_is_forbidden(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}{self.bobs.pk}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_retrieve_missing_reference_is_404(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}99999/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_completed_reference(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}{self.completed.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["client_name"], "Acme Mining")
        self.assertEqual(response.data["technology_names"], ["Django"])

    def test_stats_cover_visible_set(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}stats/")
        self.assertEqual(
            response.data,
            {
                "total_references": 3,
                "completed_references": 1,
                "ongoing_references": 2,
                "high_priority_references": 0,
            },
        )

    def test_filter_options(self):
        self.make_reference(title="Globex job", client=self.globex, technologies=[self.react], responsible="dan@example.com")
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}filter-options/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["clients"],
            [{"id": self.acme.pk, "name": "Acme Mining"}, {"id": self.globex.pk, "name": "Globex"}],
        )
        self.assertEqual([t["name"] for t in response.data["technologies"]], ["Django", "React"])
        self.assertEqual(
            response.data["responsible_persons"],
            ["alice@example.com", "bob@example.com", "carol@example.com", "dan@example.com"],
        )


class ReferenceListingTests(ReferenceFixtureMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.admin)

    def test_pagination_block(self):
        for index in range(25):
            self.make_reference(title=f"Project {index:02d}")
        response = self.client.get(self.url, {"page": 3, "limit": 10})
        self.assertEqual(len(response.data["references"]), 5)
        self.assertEqual(response.data["pagination"], {"page": 3, "limit": 10, "total": 25, "pages": 3})

    def test_page_past_the_end_is_empty(self):
        self.make_reference()
        response = self.client.get(self.url, {"page": 5})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["references"], [])

    def test_limit_is_capped(self):
        response = self.client.get(self.url, {"limit": 1000})
        self.assertEqual(response.data["pagination"]["limit"], 100)

    def test_sort_by_title_ascending(self):
        self.make_reference(title="Beta")
        self.make_reference(title="Alpha")
        response = self.client.get(self.url, {"sort_by": "title", "sort_order": "asc"})
        self.assertEqual([r["title"] for r in response.data["references"]], ["Alpha", "Beta"])

    def test_unknown_sort_field_is_rejected(self):
        response = self.client.get(self.url, {"sort_by": "password"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("sort_by", response.data)

    def test_invalid_status_filter_is_rejected(self):
        response = self.client.get(self.url, {"status": "Archived"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_query_matches_keywords_client_and_technology(self):
        self.make_reference(title="One", keywords=["blockchain"])
        self.make_reference(title="Two", client=self.globex)
        self.make_reference(title="Three", technologies=[self.react, self.django])
        self.make_reference(title="Four")

        self.assertEqual(
            [r["title"] for r in self.client.get(self.url, {"query": "BLOCKCHAIN"}).data["references"]],
            ["One"],
        )
        self.assertEqual(
            [r["title"] for r in self.client.get(self.url, {"query": "globex"}).data["references"]],
            ["Two"],
        )
        response = self.client.get(self.url, {"query": "react"})
        self.assertEqual([r["title"] for r in response.data["references"]], ["Three"])
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_query_matches_accented_keywords_case_insensitively(self):
        self.make_reference(title="Energy", keywords=["Énergie", "solaire"])
        self.make_reference(title="Plain")
        for query in ("Énergie", "énergie", "ÉNERGIE"):
            response = self.client.get(self.url, {"query": query})
            self.assertEqual([r["title"] for r in response.data["references"]], ["Energy"])

    def test_query_does_not_match_keyword_storage_syntax(self):
        self.make_reference(title="Tagged", keywords=["mining", "erp"])
        self.make_reference(title="Untagged")
        for query in ("[", '"', '", "'):
            response = self.client.get(self.url, {"query": query})
            self.assertEqual(response.data["references"], [])

    def test_structured_filters(self):
        self.make_reference(title="Match", country=self.senegal, priority="High", start_date=date(2024, 2, 1), end_date=date(2024, 5, 1))
        self.make_reference(title="Too early", country=self.senegal, priority="High", start_date=date(2023, 2, 1))
        self.make_reference(title="Wrong country", priority="High", start_date=date(2024, 2, 1))
        response = self.client.get(
            self.url,
            {"country": self.senegal.pk, "priority": "High", "start_date": "2024-01-01", "end_date": "2024-06-30"},
        )
        self.assertEqual([r["title"] for r in response.data["references"]], ["Match"])

    def test_technologies_filter_matches_any(self):
        self.make_reference(title="Django only")
        self.make_reference(title="React only", technologies=[self.react])
        self.make_reference(title="Both", technologies=[self.react, self.django])
        response = self.client.get(self.url, {"technologies": f"{self.react.pk}", "sort_by": "title", "sort_order": "asc"})
        self.assertEqual([r["title"] for r in response.data["references"]], ["Both", "React only"])

    def test_search_endpoint_applies_filters(self):
        self.make_reference(title="Completed", status="Completed")
        self.make_reference(title="Ongoing", status="En cours")
        response = self.client.post(f"{self.url}search/", {"status": "En cours"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["title"] for r in response.data], ["Ongoing"])


class ReferenceWriteTests(ReferenceFixtureMixin, APITestCase):
    def test_create_sets_creator(self):
        self.client.force_authenticate(self.alice)
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        reference = Reference.objects.get(pk=response.data["id"])
        self.assertEqual(reference.created_by, self.alice)
        self.assertEqual(reference.keywords, ["analytics", "bi"])

    def test_create_requires_a_technology(self):
        self.client.force_authenticate(self.alice)
        response = self.client.post(self.url, self.payload(technologies=[]), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("technologies", response.data)

    def test_create_rejects_end_before_start(self):
        self.client.force_authenticate(self.alice)
        response = self.client.post(
            self.url, self.payload(start_date="2024-05-01", end_date="2024-01-01"), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", response.data)

    def test_create_rejects_zero_employees(self):
        self.client.force_authenticate(self.alice)
        response = self.client.post(self.url, self.payload(employees_involved=0), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("employees_involved", response.data)

    def test_responsible_can_update(self):
        reference = self.make_reference(status="En cours", responsible="alice@example.com")
        self.client.force_authenticate(self.alice)
        response = self.client.patch(f"{self.url}{reference.pk}/", {"status": "Completed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        reference.refresh_from_db()
        self.assertEqual(reference.status, "Completed")

    def test_create_rejects_inactive_client(self):
        self.acme.is_active = False
        self.acme.save()
        self.client.force_authenticate(self.alice)
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("client", response.data)

    def test_viewer_cannot_update_completed_reference(self):
        reference = self.make_reference()
        self.client.force_authenticate(self.alice)
        response = self.client.patch(f"{self.url}{reference.pk}/", {"title": "Hijacked"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_access_right_allows_update(self):
        reference = self.make_reference()
        AccessRight.objects.create(user=self.alice, resource="references", permissions=["update"])
        self.client.force_authenticate(self.alice)
        response = self.client.patch(f"{self.url}{reference.pk}/", {"title": "Renamed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_keeps_documents(self):
        reference = self.make_reference(responsible="alice@example.com")
        document = Document.objects.create(
            doc_id="1_abc", original_name="a.pdf", file_name="1_abc.pdf", file="documents/other/1_abc.pdf",
            reference=reference, uploaded_by=self.alice,
        )
        self.client.force_authenticate(self.alice)
        response = self.client.delete(f"{self.url}{reference.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"success": True})
        self.assertFalse(Reference.objects.filter(pk=reference.pk).exists())
        document.refresh_from_db()
        self.assertIsNone(document.reference)

    def test_reference_documents_by_category(self):
        reference = self.make_reference()
        Document.objects.create(
            doc_id="1_a", original_name="shot.png", file_name="1_a.png", file="documents/screenshots/1_a.png",
            category="screenshots", reference=reference,
        )
        Document.objects.create(
            doc_id="2_b", original_name="cert.pdf", file_name="2_b.pdf", file="documents/certificates/2_b.pdf",
            category="completionCertificate", reference=reference,
        )
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"{self.url}{reference.pk}/documents/", {"category": "screenshots"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d["id"] for d in response.data], ["1_a"])
        self.assertEqual(response.data[0]["url"], "/uploads/documents/screenshots/1_a.png")


class ReferenceTenancyTests(ReferenceFixtureMixin, APITestCase):
    def test_references_of_other_companies_are_hidden(self):
        north = Company.objects.create(code="NORTH", name="North")
        south = Company.objects.create(code="SOUTH", name="South")
        self.make_reference(title="North job", company=north)
        south_job = self.make_reference(title="South job", company=south)
        self.alice.company = north
        self.alice.save()
        self.client.force_authenticate(self.alice)

        response = self.client.get(self.url)
        self.assertEqual([r["title"] for r in response.data["references"]], ["North job"])
        response = self.client.get(f"{self.url}{south_job.pk}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_user_without_company_sees_only_shared_references(self):
        south = Company.objects.create(code="SOUTH", name="South")
        self.make_reference(title="South job", company=south)
        self.make_reference(title="Shared job")
        self.client.force_authenticate(self.bob)

        response = self.client.get(self.url)
        self.assertEqual([r["title"] for r in response.data["references"]], ["Shared job"])
        response = self.client.post(f"{self.url}search/", {"query": "job"}, format="json")
        self.assertEqual([r["title"] for r in response.data], ["Shared job"])

    def test_master_data_of_other_companies_cannot_be_linked(self):
        north = Company.objects.create(code="NORTH", name="North")
        south = Company.objects.create(code="SOUTH", name="South")
        self.alice.company = north
        self.alice.save()
        north_client = Client.objects.create(name="North client", company=north)
        north_country = Country.objects.create(name="Morocco", code="MA", company=north)
        north_tech = Technology.objects.create(name="Vue", company=north)
        south_client = Client.objects.create(name="South client", company=south)
        south_tech = Technology.objects.create(name="Angular", company=south)
        valid = {"client": north_client.pk, "country": north_country.pk, "technologies": [north_tech.pk]}
        self.client.force_authenticate(self.alice)

        response = self.client.post(self.url, self.payload(**dict(valid, client=south_client.pk)), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("client", response.data)
        response = self.client.post(self.url, self.payload(**dict(valid, technologies=[south_tech.pk])), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("technologies", response.data)
        response = self.client.post(self.url, self.payload(**dict(valid, country=self.mauritania.pk)), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("country", response.data)

        response = self.client.post(self.url, self.payload(**valid), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Reference.objects.get(pk=response.data["id"]).company, north)
