"""Unit tests for BaseModel.

Uses a concrete test model created via Django's SchemaEditor so the
abstract base can be exercised against a real database.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from freezegun import freeze_time

from django.db import connection, models

from modules.core.models import BaseModel

pytestmark = pytest.mark.unit


class StampedRecord(BaseModel):
    label = models.CharField(max_length=100)

    class Meta(BaseModel.Meta):
        app_label = "core"
        db_table = "test_stamped_record"


@pytest.fixture(scope="session")
def _test_tables(django_db_setup, django_db_blocker):
    """Create the table for the concrete test model (idempotent for --reuse-db)."""
    with django_db_blocker.unblock():
        with connection.schema_editor() as editor:
            if StampedRecord._meta.db_table not in connection.introspection.table_names():
                editor.create_model(StampedRecord)


@pytest.fixture(autouse=True)
def _use_test_tables(_test_tables):
    """Ensure the test table exists for every test in this module."""


class TestIdentity:
    def test_id_is_uuid_version_7(self):
        obj = StampedRecord.objects.create(label="a")
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_time_ordered(self):
        a = StampedRecord.objects.create(label="first")
        b = StampedRecord.objects.create(label="second")
        assert str(a.id) < str(b.id)

    def test_id_is_not_editable(self):
        assert StampedRecord._meta.get_field("id").editable is False


class TestTimestamps:
    def test_set_on_create(self):
        with freeze_time("2025-01-01 12:00:00"):
            obj = StampedRecord.objects.create(label="a")
        assert obj.created_at.isoformat().startswith("2025-01-01T12:00:00")
        assert obj.updated_at == obj.created_at

    def test_updated_at_changes_on_save_created_at_does_not(self):
        with freeze_time("2025-01-01 12:00:00"):
            obj = StampedRecord.objects.create(label="original")
        with freeze_time("2025-01-01 12:05:00"):
            obj.label = "modified"
            obj.save()
        obj.refresh_from_db()
        assert obj.updated_at - obj.created_at == timedelta(minutes=5)

    def test_save_with_update_fields_includes_updated_at(self):
        with freeze_time("2025-01-01 12:00:00"):
            obj = StampedRecord.objects.create(label="original")
        with freeze_time("2025-01-01 13:00:00"):
            obj.label = "modified"
            obj.save(update_fields=["label"])
        obj.refresh_from_db()
        assert obj.label == "modified"
        assert obj.updated_at - obj.created_at == timedelta(hours=1)
