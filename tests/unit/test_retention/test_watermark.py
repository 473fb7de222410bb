"""Unit tests for purge watermark stores."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError


class TestPreferenceWatermarkStore:
    """Tests for PreferenceWatermarkStore."""

    def test_defaults_to_zero(self, watermark_store):
        """A fresh installation has never purged."""
        assert watermark_store.read() == 0

    def test_write_then_read(self, watermark_store):
        watermark_store.write(1_700_000_000_123)

        assert watermark_store.read() == 1_700_000_000_123

    def test_last_writer_wins(self, watermark_store):
        watermark_store.write(200)
        watermark_store.write(100)

        assert watermark_store.read() == 100

    def test_survives_new_store_instance(self, session_factory):
        """The watermark is durable, not held by the store object."""
        from tvprovider.services.retention.watermark import PreferenceWatermarkStore

        PreferenceWatermarkStore(session_factory).write(42)

        assert PreferenceWatermarkStore(session_factory).read() == 42

    def test_keys_are_independent(self, session_factory):
        from tvprovider.services.retention.watermark import PreferenceWatermarkStore

        PreferenceWatermarkStore(session_factory, key="a").write(1)

        assert PreferenceWatermarkStore(session_factory, key="b").read() == 0

    def test_malformed_value_reads_as_zero(self, session_factory, watermark_store):
        from tvprovider.models import Preference

        db = session_factory()
        db.add(Preference(key=watermark_store.key, value="not-a-number"))
        db.commit()
        db.close()

        assert watermark_store.read() == 0

    def test_read_error_is_wrapped(self):
        from tvprovider.services.retention.errors import RetentionStorageError
        from tvprovider.services.retention.watermark import PreferenceWatermarkStore

        mock_db = MagicMock()
        mock_db.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        store = PreferenceWatermarkStore(lambda: mock_db)

        with pytest.raises(RetentionStorageError, match="read failed") as exc_info:
            store.read()

        assert exc_info.value.resource == "watermark"
        mock_db.close.assert_called_once()

    def test_write_error_rolls_back_and_is_wrapped(self):
        from tvprovider.services.retention.errors import RetentionStorageError
        from tvprovider.services.retention.watermark import PreferenceWatermarkStore

        mock_db = MagicMock()
        mock_db.get.return_value = None
        mock_db.commit.side_effect = SQLAlchemyError("disk full")
        store = PreferenceWatermarkStore(lambda: mock_db)

        with pytest.raises(RetentionStorageError, match="write failed"):
            store.write(123)

        mock_db.rollback.assert_called_once()
        mock_db.close.assert_called_once()


class TestInMemoryWatermarkStore:
    """Tests for InMemoryWatermarkStore."""

    def test_defaults_to_zero(self):
        from tvprovider.services.retention.watermark import InMemoryWatermarkStore

        assert InMemoryWatermarkStore().read() == 0

    def test_write_then_read(self):
        from tvprovider.services.retention.watermark import InMemoryWatermarkStore

        store = InMemoryWatermarkStore(initial=5)
        store.write(9)

        assert store.read() == 9
