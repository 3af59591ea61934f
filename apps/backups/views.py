"""
API views for backup management.

/api/backup/       administrators: list, download, export, create, restore, delete
/api/backup/auto/  scheduler: run the automatic backup, report status
"""

import logging

from django.http import HttpResponse
from django.utils import timezone

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import CanBackupRestore

from .exceptions import Forbidden, InvalidFormat, Unauthenticated
from .services import BackupService

logger = logging.getLogger(__name__)


def serialize_artifact(meta):
    return {
        "filename": meta.filename,
        "size": meta.size,
        "created_at": meta.created_at.isoformat(),
        "origin": meta.origin,
    }


def json_attachment(content: bytes, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="application/json")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


class BackupView(APIView):
    """
    Administrative backup endpoint.

    GET    ?action=list | download&filename=... | export
    POST   action=create | restore (with "data" or "filename")
    DELETE ?filename=...

    The action may be given in the query string or the JSON body.
    """

    permission_classes = [CanBackupRestore]

    def permission_denied(self, request, message=None, code=None):
        if request.authenticators and not request.successful_authenticator:
            raise Unauthenticated()
        raise Forbidden()

    def get_service(self):
        return BackupService()

    def _action(self, request, default):
        action = request.query_params.get("action")
        if not action and isinstance(request.data, dict):
            action = request.data.get("action")
        return action or default

    def _filename(self, request):
        filename = request.query_params.get("filename")
        if not filename and isinstance(request.data, dict):
            filename = request.data.get("filename")
        return filename

    def get(self, request):
        action = self._action(request, "list")
        service = self.get_service()

        if action == "list":
            artifacts = service.list_artifacts(request.user)
            return Response(
                {
                    "backups": [serialize_artifact(meta) for meta in artifacts],
                    "total": len(artifacts),
                }
            )

        if action == "download":
            filename = self._filename(request)
            if not filename:
                return Response(
                    {"detail": "filename is required"}, status=status.HTTP_400_BAD_REQUEST
                )
            return json_attachment(service.download(request.user, filename), filename)

        if action == "export":
            content = service.export(request.user)
            return json_attachment(content, f"estommy-backup-{timezone.now():%Y-%m-%d}.json")

        return Response({"detail": f"Unknown action: {action}"}, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        action = self._action(request, None)
        service = self.get_service()

        if action == "create":
            result = service.create_manual(request.user)
            return Response(
                {
                    "message": "Backup created successfully",
                    "backup": serialize_artifact(result.artifact),
                    "stats": result.counts,
                },
                status=status.HTTP_201_CREATED,
            )

        if action == "restore":
            if not isinstance(request.data, dict):
                raise InvalidFormat()
            restored = service.restore_from(
                request.user,
                data=request.data.get("data"),
                filename=request.data.get("filename"),
            )
            return Response(
                {"message": "System state restored successfully", "restored": restored}
            )

        return Response({"detail": f"Unknown action: {action}"}, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request):
        filename = self._filename(request)
        if not filename:
            return Response({"detail": "filename is required"}, status=status.HTTP_400_BAD_REQUEST)
        self.get_service().delete(request.user, filename)
        return Response({"message": "Backup deleted successfully", "filename": filename})


class AutomaticBackupView(APIView):
    """
    Scheduler endpoint, authenticated by "Authorization: Bearer <secret>".

    POST runs the automatic backup, GET reports the automatic backup status.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get_service(self):
        return BackupService()

    @staticmethod
    def _bearer_secret(request):
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header.startswith("Bearer "):
            return None
        return header[len("Bearer "):]

    def post(self, request):
        result = self.get_service().run_automatic(self._bearer_secret(request))
        return Response(
            {
                "success": True,
                "message": "Automatic backup completed successfully",
                "backup": {
                    "filename": result.artifact.filename,
                    "size": result.artifact.size,
                    "stats": result.counts,
                    "duration_ms": result.duration_ms,
                    "pruned": result.pruned,
                },
            }
        )

    def get(self, request):
        service = self.get_service()
        service.check_scheduler_secret(self._bearer_secret(request))
        return Response(service.status())
