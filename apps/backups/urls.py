"""
URL configuration for the backup API.
"""

from django.urls import path

from . import views

app_name = "backups"

urlpatterns = [
    path("", views.BackupView.as_view(), name="backup"),
    path("auto/", views.AutomaticBackupView.as_view(), name="automatic_backup"),
]
