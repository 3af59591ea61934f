"""
Core models for the Estommy back office.

Provides the shared base model for every business record, the custom user model
and the activity log used as the audit trail.
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


def generate_id():
    """Generate an opaque string identifier for new records."""
    return uuid.uuid4().hex


class TimeStampedModel(models.Model):
    """
    Abstract base for business records.

    Identifiers are opaque strings so that records carried over from existing
    backups keep their original ids. Timestamps use defaults instead of
    auto_now/auto_now_add: bulk inserts keep the values they are given, while
    save() still refreshes updated_at for ordinary edits.
    """

    id = models.CharField(
        primary_key=True,
        max_length=64,
        default=generate_id,
        editable=False,
        help_text="Unique identifier",
    )

    created_at = models.DateTimeField(default=timezone.now, help_text="When the record was created")

    updated_at = models.DateTimeField(
        default=timezone.now, help_text="When the record was last updated"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.updated_at = timezone.now()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


class User(AbstractUser):
    """
    Back office user with a role-based capability set.
    """

    # Role choices
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"

    ROLE_CHOICES = [
        (ADMIN, "Administrator"),
        (MANAGER, "Manager"),
        (USER, "User"),
    ]

    id = models.CharField(
        primary_key=True,
        max_length=64,
        default=generate_id,
        editable=False,
    )

    name = models.CharField(max_length=150, blank=True, help_text="Display name")

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=USER,
        help_text="User's role in the system",
    )

    # Contact information
    phone = models.CharField(max_length=20, blank=True, help_text="User's phone number")

    image = models.CharField(max_length=500, blank=True, help_text="Avatar image path")

    provider = models.CharField(
        max_length=50, blank=True, default="credentials", help_text="Sign-in provider"
    )

    notifications = models.BooleanField(default=True, help_text="Receive notifications")

    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "users"
        ordering = ["username"]
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username

    def save(self, *args, **kwargs):
        self.updated_at = timezone.now()
        super().save(*args, **kwargs)


class Activity(models.Model):
    """
    Append-only activity log.

    Records who did what to which entity. System actions (such as scheduled
    backups) use user_id "system". Activities are themselves part of every
    backup, so they carry string identifiers like the rest of the business data.
    """

    # Actions
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    RESTORE = "RESTORE"
    BACKUP = "BACKUP"

    ACTION_CHOICES = [
        (CREATE, "Create"),
        (UPDATE, "Update"),
        (DELETE, "Delete"),
        (LOGIN, "Login"),
        (LOGOUT, "Logout"),
        (RESTORE, "Restore"),
        (BACKUP, "Backup"),
    ]

    # Entity types
    PRODUCT = "PRODUCT"
    CUSTOMER = "CUSTOMER"
    SALE = "SALE"
    CREDIT = "CREDIT"
    CATEGORY = "CATEGORY"
    USER_ENTITY = "USER"
    PERMISSION = "PERMISSION"
    SYSTEM = "SYSTEM"

    ENTITY_TYPE_CHOICES = [
        (PRODUCT, "Product"),
        (CUSTOMER, "Customer"),
        (SALE, "Sale"),
        (CREDIT, "Credit"),
        (CATEGORY, "Category"),
        (USER_ENTITY, "User"),
        (PERMISSION, "Permission"),
        (SYSTEM, "System"),
    ]

    SYSTEM_USER_ID = "system"
    SYSTEM_USER_NAME = "System"

    id = models.CharField(
        primary_key=True,
        max_length=64,
        default=generate_id,
        editable=False,
    )

    # Plain string so that system actors and deleted users can still be logged
    user_id = models.CharField(max_length=64, help_text="ID of the acting user, or 'system'")

    user_name = models.CharField(max_length=150, blank=True)

    action = models.CharField(max_length=20, choices=ACTION_CHOICES)

    entity_type = models.CharField(max_length=20, choices=ENTITY_TYPE_CHOICES)

    entity_id = models.CharField(max_length=64, null=True, blank=True)

    entity_name = models.CharField(max_length=255, null=True, blank=True)

    description = models.TextField(blank=True)

    metadata = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "activities"
        ordering = ["-created_at"]
        verbose_name = "Activity"
        verbose_name_plural = "Activities"
        indexes = [
            models.Index(fields=["entity_type", "-created_at"], name="activity_entity_created_idx"),
            models.Index(fields=["action", "-created_at"], name="activity_action_created_idx"),
        ]

    def __str__(self):
        return f"{self.user_name or self.user_id} {self.action} {self.entity_type}"
