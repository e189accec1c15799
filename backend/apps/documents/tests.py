import shutil
import tempfile
from datetime import date
from pathlib import Path
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.companies.models import Company
from apps.documents.models import Document
from apps.documents.services.uploads import generate_doc_id, rule_for
from apps.master_data.models import Client, Country, Technology
from apps.references.models import Reference
from apps.users.models import UserRole


User = get_user_model()


class CategoryRuleTests(SimpleTestCase):
    def test_known_categories(self):
        self.assertEqual(rule_for("screenshots")[1], "documents/screenshots")
        self.assertEqual(rule_for("completionCertificate")[0], (".pdf", ".doc", ".docx"))

    def test_unknown_category_uses_other_rules(self):
        self.assertEqual(rule_for("misc"), rule_for("otherDocuments"))

    def test_generated_ids_are_unique(self):
        ids = {generate_doc_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)
        timestamp, token = next(iter(ids)).split("_")
        self.assertTrue(timestamp.isdigit())
        self.assertTrue(token.isalnum())


class DocumentAPITestCase(APITestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.override = override_settings(MEDIA_ROOT=self.media_root, MEDIA_URL="/uploads/")
        self.override.enable()
        self.addCleanup(self.override.disable)
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="x", role=UserRole.ADMIN
        )
        self.alice = User.objects.create_user(username="alice@example.com", email="alice@example.com", password="x")
        self.bob = User.objects.create_user(username="bob@example.com", email="bob@example.com", password="x")
        self.reference = Reference.objects.create(
            title="ERP rollout",
            description="Deployment",
            client=Client.objects.create(name="Acme"),
            country=Country.objects.create(name="Mauritania"),
            employees_involved=4,
            status="En cours",
            priority="High",
            responsible="alice@example.com",
            start_date=date(2024, 1, 1),
        )
        self.reference.technologies.set([Technology.objects.create(name="Django")])
        self.upload_url = "/api/documents/upload/"

    def upload(self, *files, **fields):
        data = {"file": list(files) if len(files) > 1 else files[0]}
        data.update(fields)
        return self.client.post(self.upload_url, data, format="multipart")

    def stored_files(self):
        return sorted(p.relative_to(self.media_root).as_posix() for p in Path(self.media_root).rglob("*") if p.is_file())


class DocumentUploadTests(DocumentAPITestCase):
    def test_single_upload_without_reference(self):
        self.client.force_authenticate(self.bob)
        response = self.upload(SimpleUploadedFile("Shot.PNG", b"png-bytes", content_type="image/png"), category="screenshots")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["filename"], "Shot.PNG")
        self.assertEqual(response.data["category"], "screenshots")
        self.assertEqual(response.data["type"], "image/png")
        self.assertTrue(response.data["url"].startswith("/uploads/documents/screenshots/"))
        self.assertTrue(response.data["url"].endswith(".png"))
        self.assertEqual(len(self.stored_files()), 1)
        self.assertFalse(Document.objects.exists())

    def test_missing_category_defaults_to_other_documents(self):
        self.client.force_authenticate(self.bob)
        response = self.upload(SimpleUploadedFile("report.xlsx", b"data"))
        self.assertEqual(response.data["category"], "otherDocuments")
        self.assertTrue(response.data["url"].startswith("/uploads/documents/other/"))

    def test_no_file(self):
        self.client.force_authenticate(self.bob)
        response = self.client.post(self.upload_url, {"category": "screenshots"}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "No file uploaded")

    def test_disallowed_extension_rejects_whole_batch(self):
        self.client.force_authenticate(self.bob)
        response = self.upload(
            SimpleUploadedFile("ok.pdf", b"pdf"),
            SimpleUploadedFile("bad.exe", b"exe"),
            category="completionCertificate",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["error"],
            "File type .exe not allowed for completionCertificate. Allowed types: .pdf, .doc, .docx",
        )
        self.assertEqual(self.stored_files(), [])

    @override_settings(DOCUMENT_MAX_UPLOAD_SIZE=4)
    def test_oversized_file_is_rejected(self):
        self.client.force_authenticate(self.bob)
        response = self.upload(SimpleUploadedFile("big.pdf", b"0123456789"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.stored_files(), [])

    def test_multiple_files_with_reference_are_recorded(self):
        self.client.force_authenticate(self.alice)
        response = self.upload(
            SimpleUploadedFile("a.pdf", b"a", content_type="application/pdf"),
            SimpleUploadedFile("b.docx", b"b"),
            category="otherDocuments",
            reference_id=self.reference.pk,
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(Document.objects.filter(reference=self.reference, uploaded_by=self.alice).count(), 2)
        document = Document.objects.get(doc_id=response.data["files"][0]["id"])
        self.assertEqual(document.original_name, "a.pdf")
        self.assertTrue((Path(self.media_root) / document.relative_path).exists())

    def test_unknown_reference_is_rejected(self):
        self.client.force_authenticate(self.alice)
        response = self.upload(SimpleUploadedFile("a.pdf", b"a"), reference_id=99999)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.stored_files(), [])

    def test_hidden_reference_is_forbidden(self):
        self.client.force_authenticate(self.bob)
        response = self.upload(SimpleUploadedFile("a.pdf", b"a"), reference_id=self.reference.pk)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_reference_of_another_company_is_rejected(self):
        north = Company.objects.create(code="NORTH", name="North")
        south = Company.objects.create(code="SOUTH", name="South")
        self.reference.company = south
        self.reference.save()
        self.alice.company = north
        self.alice.save()
        self.client.force_authenticate(self.alice)
        response = self.upload(SimpleUploadedFile("a.pdf", b"a"), reference_id=self.reference.pk)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.stored_files(), [])
        self.assertFalse(Document.objects.exists())

    def test_database_error_does_not_fail_upload(self):
        self.client.force_authenticate(self.alice)
        with mock.patch.object(Document.objects, "create", side_effect=DatabaseError("down")):
            response = self.upload(SimpleUploadedFile("a.pdf", b"a"), reference_id=self.reference.pk)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(self.stored_files()), 1)

    def test_requires_authentication(self):
        response = self.upload(SimpleUploadedFile("a.pdf", b"a"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DocumentDetailTests(DocumentAPITestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.alice)
        response = self.upload(SimpleUploadedFile("cert.pdf", b"pdf"), category="completionCertificate", reference_id=self.reference.pk)
        self.doc_id = response.data["id"]
        self.client.force_authenticate(None)

    def test_responsible_can_read(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get(f"/api/documents/{self.doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["original_name"], "cert.pdf")
        self.assertEqual(response.data["category"], "completionCertificate")

    def test_unrelated_user_cannot_read(self):
        self.client.force_authenticate(self.bob)
        response = self.client.get(f"/api/documents/{self.doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_document(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get("/api/documents/123_nope/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unrelated_user_cannot_delete(self):
        self.client.force_authenticate(self.bob)
        response = self.client.delete(f"/api/documents/{self.doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Document.objects.filter(doc_id=self.doc_id).exists())

    def test_admin_deletes_file_and_record(self):
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f"/api/documents/{self.doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"success": True, "message": "Document deleted successfully"})
        self.assertFalse(Document.objects.filter(doc_id=self.doc_id).exists())
        self.assertEqual(self.stored_files(), [])

    def test_missing_file_does_not_block_deletion(self):
        document = Document.objects.get(doc_id=self.doc_id)
        (Path(self.media_root) / document.relative_path).unlink()
        self.client.force_authenticate(self.alice)
        response = self.client.delete(f"/api/documents/{self.doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Document.objects.filter(doc_id=self.doc_id).exists())

    def test_responsible_deletes_document_uploaded_by_someone_else(self):
        self.client.force_authenticate(self.admin)
        response = self.upload(SimpleUploadedFile("plan.pdf", b"pdf"), reference_id=self.reference.pk)
        doc_id = response.data["id"]
        self.assertEqual(Document.objects.get(doc_id=doc_id).uploaded_by, self.admin)

        self.client.force_authenticate(self.alice)
        response = self.client.delete(f"/api/documents/{doc_id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Document.objects.filter(doc_id=doc_id).exists())
