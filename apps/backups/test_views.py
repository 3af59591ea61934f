"""
Tests for the backup API endpoints.
"""

import json

from django.urls import reverse

import pytest
from rest_framework import status

from apps.core.models import Activity
from apps.crm.models import Customer
from apps.inventory.models import Product

BACKUP_URL = "/api/backup/"
AUTO_URL = "/api/backup/auto/"


def restore_payload():
    return {
        "action": "restore",
        "data": {
            "version": "1.2",
            "timestamp": "2024-05-01T02:00:00.000Z",
            "data": {
                "products": [{"id": "p1", "name": "Kettle", "price": 35.5, "stock": 4}],
                "customers": [{"id": "c1", "name": "Yaw"}],
            },
        },
    }


@pytest.mark.django_db
class TestBackupEndpointAccess:
    def test_urls_resolve(self):
        assert reverse("backups:backup") == BACKUP_URL
        assert reverse("backups:automatic_backup") == AUTO_URL

    def test_anonymous_request_is_unauthenticated(self, api_client, backup_dir):
        response = api_client.post(BACKUP_URL, {"action": "create"}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"detail": "Authentication required"}
        assert not backup_dir.exists()

    def test_non_admin_is_forbidden(self, api_client, regular_user, backup_dir):
        api_client.force_authenticate(user=regular_user)

        response = api_client.post(BACKUP_URL, {"action": "create"}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"detail": "Forbidden: Admin access required"}
        assert not backup_dir.exists()
        assert Activity.objects.count() == 0

    def test_manager_cannot_list(self, api_client, manager_user, backup_dir):
        api_client.force_authenticate(user=manager_user)

        response = api_client.get(BACKUP_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestBackupEndpoint:
    def test_list_returns_newest_first(self, admin_client, write_artifact):
        older = write_artifact("manual", days_ago=2)
        newer = write_artifact("automatic", days_ago=1)

        response = admin_client.get(BACKUP_URL, {"action": "list"})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total"] == 2
        assert [item["filename"] for item in body["backups"]] == [newer, older]
        assert body["backups"][0]["origin"] == "automatic"

    def test_list_is_the_default_action(self, admin_client, backup_dir):
        response = admin_client.get(BACKUP_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"backups": [], "total": 0}

    def test_create_stores_backup(self, admin_client, store_data, backup_dir):
        response = admin_client.post(BACKUP_URL, {"action": "create"}, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["message"] == "Backup created successfully"
        assert body["backup"]["filename"].startswith("backup_manual_")
        assert body["backup"]["origin"] == "manual"
        assert body["stats"]["sales"] == 2
        assert (backup_dir / body["backup"]["filename"]).exists()

    def test_action_in_query_string(self, admin_client, backup_dir):
        response = admin_client.post(f"{BACKUP_URL}?action=create", {}, format="json")
        assert response.status_code == status.HTTP_201_CREATED

    def test_unknown_action(self, admin_client, backup_dir):
        response = admin_client.post(BACKUP_URL, {"action": "explode"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_download_returns_attachment(self, admin_client, write_artifact):
        filename = write_artifact("manual", content=b'{"data": {"products": []}}')

        response = admin_client.get(BACKUP_URL, {"action": "download", "filename": filename})

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Type"] == "application/json"
        assert response["Content-Disposition"] == f'attachment; filename="{filename}"'
        assert response.content == b'{"data": {"products": []}}'

    def test_download_missing_backup(self, admin_client, backup_dir):
        response = admin_client.get(
            BACKUP_URL,
            {"action": "download", "filename": "backup_manual_2020-01-01_00-00-00.json"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Backup file not found"}

    def test_download_rejects_path_traversal(self, admin_client, backup_dir):
        response = admin_client.get(
            BACKUP_URL, {"action": "download", "filename": "../config/settings.py"}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_download_requires_filename(self, admin_client, backup_dir):
        response = admin_client.get(BACKUP_URL, {"action": "download"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_export_is_not_stored(self, admin_client, store_data, backup_dir):
        response = admin_client.get(BACKUP_URL, {"action": "export"})

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Disposition"].startswith('attachment; filename="estommy-backup-')
        document = json.loads(response.content)
        assert document["version"] == "1.2"
        assert len(document["data"]["products"]) == 2
        assert not backup_dir.exists()

    def test_restore_inline_document(self, admin_client, store_data, backup_dir):
        response = admin_client.post(BACKUP_URL, restore_payload(), format="json")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "System state restored successfully"
        assert body["restored"]["products"] == 1
        assert list(Product.objects.values_list("name", flat=True)) == ["Kettle"]
        assert list(Customer.objects.values_list("pk", flat=True)) == ["c1"]

    def test_restore_invalid_document_leaves_store_unchanged(
        self, admin_client, store_data, backup_dir
    ):
        payload = {"action": "restore", "data": {"products": [{"id": "x"}]}}

        response = admin_client.post(BACKUP_URL, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"detail": "Invalid backup file format"}
        assert Product.objects.count() == 2
        assert Customer.objects.count() == 2

    def test_restore_without_source(self, admin_client, backup_dir):
        response = admin_client.post(BACKUP_URL, {"action": "restore"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_restore_from_stored_backup(self, admin_client, store_data, backup_dir):
        created = admin_client.post(BACKUP_URL, {"action": "create"}, format="json").json()
        Customer.objects.filter(name="Bob Owusu").delete()

        response = admin_client.post(
            BACKUP_URL,
            {"action": "restore", "filename": created["backup"]["filename"]},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert Customer.objects.filter(name="Bob Owusu").exists()

    def test_delete_manual_backup(self, admin_client, write_artifact, backup_dir):
        filename = write_artifact("manual")

        response = admin_client.delete(f"{BACKUP_URL}?filename={filename}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["filename"] == filename
        assert not (backup_dir / filename).exists()

    def test_delete_recent_automatic_backup_is_protected(
        self, admin_client, write_artifact, backup_dir
    ):
        filename = write_artifact("automatic", days_ago=1)

        response = admin_client.delete(f"{BACKUP_URL}?filename={filename}")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert (backup_dir / filename).exists()

    def test_delete_requires_filename(self, admin_client, backup_dir):
        response = admin_client.delete(BACKUP_URL)
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestAutomaticBackupEndpoint:
    def test_missing_header_is_rejected(self, api_client, backup_dir):
        response = api_client.post(AUTO_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not backup_dir.exists()
        assert Activity.objects.count() == 0

    def test_wrong_secret_is_rejected(self, api_client, backup_dir):
        response = api_client.post(AUTO_URL, HTTP_AUTHORIZATION="Bearer not-the-secret")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not backup_dir.exists()

    def test_non_bearer_scheme_is_rejected(self, api_client, backup_dir):
        response = api_client.post(AUTO_URL, HTTP_AUTHORIZATION="Basic test-cron-secret")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_padded_secret_is_rejected(self, api_client, backup_dir):
        for header in ("Bearer  test-cron-secret", "Bearer test-cron-secret "):
            response = api_client.post(AUTO_URL, HTTP_AUTHORIZATION=header)
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not backup_dir.exists()

    def test_scheduler_runs_automatic_backup(self, api_client, store_data, backup_dir):
        response = api_client.post(AUTO_URL, HTTP_AUTHORIZATION="Bearer test-cron-secret")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["backup"]["filename"].startswith("backup_automatic_")
        assert body["backup"]["stats"]["customers"] == 2
        assert body["backup"]["pruned"] == []
        stored = json.loads((backup_dir / body["backup"]["filename"]).read_bytes())
        assert stored["type"] == "automatic"

    def test_scheduler_prunes_old_backups(self, api_client, write_artifact, backup_dir):
        for days in range(1, 31):
            write_artifact("automatic", days_ago=days)

        response = api_client.post(AUTO_URL, HTTP_AUTHORIZATION="Bearer test-cron-secret")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["backup"]["pruned"]) == 1
        automatic = [p for p in backup_dir.iterdir() if p.name.startswith("backup_automatic_")]
        assert len(automatic) == 30

    def test_status_requires_secret(self, api_client, backup_dir):
        response = api_client.get(AUTO_URL)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_status(self, api_client, write_artifact):
        filename = write_artifact("automatic", hours_ago=3)

        response = api_client.get(AUTO_URL, HTTP_AUTHORIZATION="Bearer test-cron-secret")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["configured"] is True
        assert body["total_backups"] == 1
        assert body["last_backup"]["filename"] == filename
