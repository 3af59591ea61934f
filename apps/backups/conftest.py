"""
Pytest configuration and fixtures for backup tests.
"""

from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.utils import timezone

import pytest

from apps.backups.config import BackupConfig
from apps.backups.services import BackupService
from apps.backups.storage import LocalStorage, build_filename

CRON_SECRET = "test-cron-secret"


@pytest.fixture(autouse=True)
def clear_backup_lock():
    """Each test starts without a held subsystem lock."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def backup_dir(tmp_path, settings):
    """
    Fixture pointing the local backend at a fresh directory.

    The directory itself is not created; the backend creates it on first write.
    """
    path = tmp_path / "backups"
    settings.BACKUP_LOCAL_PATH = str(path)
    settings.BACKUP_STORAGE_BACKEND = "local"
    settings.BACKUP_CRON_SECRET = CRON_SECRET
    return path


@pytest.fixture
def local_storage(backup_dir):
    return LocalStorage(base_path=str(backup_dir))


@pytest.fixture
def backup_config():
    return BackupConfig(
        storage_backend="local",
        cron_secret=CRON_SECRET,
        max_automatic=30,
        delete_grace_days=7,
        automatic_activity_limit=1000,
        parallel_reads=False,
        lock_timeout=60,
    )


@pytest.fixture
def backup_service(backup_config, local_storage):
    return BackupService(config=backup_config, backend=local_storage)


@pytest.fixture
def write_artifact(local_storage):
    """
    Factory fixture storing an artifact with a given origin and age.

    Usage: write_artifact("automatic", days_ago=3)
    """

    def _write(origin="manual", days_ago=0, hours_ago=0, content=b'{"data": {}}', legacy=False):
        when = timezone.now() - timedelta(days=days_ago, hours=hours_ago)
        filename = build_filename(origin, when)
        if legacy:
            filename = filename.replace("backup_automatic_", "backup_auto_")
        local_storage.base_path.mkdir(parents=True, exist_ok=True)
        (local_storage.base_path / filename).write_bytes(content)
        return filename

    return _write


@pytest.fixture
def store_data(admin_user):
    """
    Fixture populating every tracked kind with linked records.

    Returns a dict of the created objects keyed by kind.
    """
    from apps.core.models import Activity
    from apps.crm.models import Credit, Customer
    from apps.inventory.models import Category, Product
    from apps.sales.models import Profit, Sale

    base = timezone.now() - timedelta(days=10)

    category = Category.objects.create(
        name="Electronics", description="Phones and accessories", created_at=base
    )
    phone = Product.objects.create(
        name="Phone X",
        category="Electronics",
        price=Decimal("499.99"),
        cost_price=Decimal("350.00"),
        stock=12,
        created_at=base + timedelta(minutes=1),
    )
    charger = Product.objects.create(
        name="Charger",
        category="Electronics",
        price=Decimal("19.50"),
        stock=40,
        created_at=base + timedelta(minutes=2),
    )
    alice = Customer.objects.create(
        name="Alice Mensah",
        email="alice@example.com",
        phone="+233 20 000 0001",
        total_debt=Decimal("150.00"),
        created_at=base + timedelta(minutes=3),
    )
    bob = Customer.objects.create(name="Bob Owusu", created_at=base + timedelta(minutes=4))
    sale = Sale.objects.create(
        customer=alice,
        product=phone,
        date="2024-05-01",
        amount=Decimal("499.99"),
        cost_price_snapshot=Decimal("350.00"),
        created_at=base + timedelta(minutes=5),
    )
    walk_in = Sale.objects.create(
        product=charger,
        date="2024-05-02",
        amount=Decimal("19.50"),
        created_at=base + timedelta(minutes=6),
    )
    credit = Credit.objects.create(
        customer=alice,
        amount=Decimal("200.00"),
        amount_paid=Decimal("50.00"),
        due_date="2024-06-01",
        interest_rate=Decimal("2.50"),
        created_at=base + timedelta(minutes=7),
    )
    profit = Profit.objects.create(
        date="2024-05-01",
        amount=Decimal("149.99"),
        type="Income",
        description="Phone sale margin",
        created_at=base + timedelta(minutes=8),
    )
    activities = [
        Activity.objects.create(
            user_id=str(admin_user.pk),
            user_name=admin_user.display_name,
            action=Activity.CREATE,
            entity_type=Activity.PRODUCT,
            entity_id=phone.pk,
            entity_name=phone.name,
            description=f"Created product {index}",
            metadata={"index": index},
            created_at=base + timedelta(minutes=10 + index),
        )
        for index in range(3)
    ]

    return {
        "categories": [category],
        "products": [phone, charger],
        "customers": [alice, bob],
        "sales": [sale, walk_in],
        "credits": [credit],
        "profits": [profit],
        "activities": activities,
    }
