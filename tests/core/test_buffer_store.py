"""
Unit tests for BufferStore
"""

import pytest

from core.buffer_store import BufferStore
from core.exceptions import BufferNotFoundError
from core.pixel_buffer import PixelBuffer


class TestBufferStore:
    """Test BufferStore functionality"""

    @pytest.fixture
    def store(self):
        """Create a small store for each test"""
        return BufferStore(max_buffers=3)

    def test_initialization(self, store):
        """Test store initialization"""
        assert store.max_buffers == 3
        assert len(store) == 0
        assert store.total_created == 0
        assert store.evicted_count == 0

    def test_invalid_capacity(self):
        """Test a store must hold at least one buffer"""
        with pytest.raises(ValueError):
            BufferStore(max_buffers=0)

    def test_add_and_get(self, store, red_buffer):
        """Test storing a buffer"""
        buffer_id = store.add(red_buffer, name="red", metadata={"source": "test"})

        # Check ID format
        assert buffer_id.startswith("buf_")
        assert len(buffer_id) == 12

        record = store.get(buffer_id)
        assert record.buffer is red_buffer
        assert record.name == "red"
        assert record.metadata == {"source": "test"}
        assert store.get_buffer(buffer_id) is red_buffer
        assert store.contains(buffer_id)

    def test_default_name(self, store, small_buffer):
        """Test unnamed buffers are named after their ID"""
        buffer_id = store.add(small_buffer)

        assert store.get(buffer_id).name == buffer_id

    def test_get_missing(self, store):
        """Test missing IDs raise BufferNotFoundError"""
        with pytest.raises(BufferNotFoundError) as exc_info:
            store.get("buf_missing")

        assert str(exc_info.value) == "Buffer buf_missing not found"

    def test_eviction(self, store):
        """Test oldest buffers are evicted when full"""
        ids = [store.add(PixelBuffer(2, 2)) for _ in range(5)]

        assert len(store) == 3
        assert store.evicted_count == 2
        assert store.total_created == 5
        assert not store.contains(ids[0])
        assert not store.contains(ids[1])
        assert all(store.contains(buffer_id) for buffer_id in ids[2:])

    def test_replace(self, store, small_buffer, red_buffer):
        """Test replacing the pixels under an existing ID"""
        buffer_id = store.add(small_buffer)
        record = store.replace(buffer_id, red_buffer, {"operation": "swap"})

        assert store.get_buffer(buffer_id) is red_buffer
        assert record.metadata["operation"] == "swap"
        assert record.updated_at >= record.created_at

    def test_touch(self, store, small_buffer):
        """Test touching merges metadata"""
        buffer_id = store.add(small_buffer, metadata={"source": "blank"})
        store.touch(buffer_id, {"last_operation": "line"})

        assert store.get(buffer_id).metadata == {"source": "blank", "last_operation": "line"}

    def test_delete(self, store, small_buffer):
        """Test deleting buffers"""
        buffer_id = store.add(small_buffer)
        store.delete(buffer_id)

        assert not store.contains(buffer_id)
        with pytest.raises(BufferNotFoundError):
            store.delete(buffer_id)

    def test_list(self, store):
        """Test listing all buffers"""
        ids = {store.add(PixelBuffer(2, 2)) for _ in range(2)}

        assert {record.id for record in store.list()} == ids

    def test_statistics(self, store):
        """Test statistics calculation"""
        store.add(PixelBuffer(4, 4))
        store.add(PixelBuffer(2, 3))

        stats = store.get_statistics()
        assert stats["count"] == 2
        assert stats["max_buffers"] == 3
        assert stats["total_created"] == 2
        assert stats["evicted"] == 0
        assert stats["total_pixels"] == 22
        assert stats["memory_bytes"] == 88

    def test_describe(self, store, red_buffer):
        """Test record summaries carry no pixel data"""
        buffer_id = store.add(red_buffer, name="red")
        summary = store.get(buffer_id).describe()

        assert summary["id"] == buffer_id
        assert summary["width"] == 4
        assert summary["height"] == 4
        assert "buffer" not in summary

    def test_clear(self, store, small_buffer):
        """Test clearing the store"""
        store.add(small_buffer)
        store.clear()

        assert len(store) == 0
