"""
Pytest configuration and fixtures shared by every test module.
"""

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_user(django_user_model):
    """Administrator holding every capability, including backup and restore."""
    return django_user_model.objects.create_user(
        username="admin",
        email="admin@example.com",
        password="adminpass123",
        name="Store Admin",
        role="ADMIN",
    )


@pytest.fixture
def manager_user(django_user_model):
    return django_user_model.objects.create_user(
        username="manager",
        email="manager@example.com",
        password="managerpass123",
        role="MANAGER",
    )


@pytest.fixture
def regular_user(django_user_model):
    return django_user_model.objects.create_user(
        username="cashier",
        email="cashier@example.com",
        password="cashierpass123",
        role="USER",
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    """
    Fixture for API client authenticated as an administrator.
    """
    api_client.force_authenticate(user=admin_user)
    return api_client
