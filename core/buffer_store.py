"""
Buffer Store - bounded in-memory registry of named pixel buffers
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from core.constants import StoreConstants
from core.exceptions import BufferNotFoundError
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass
class StoredBuffer:
    """Single stored buffer with its bookkeeping data"""

    id: str
    buffer: PixelBuffer
    name: str
    created_at: datetime
    updated_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> Dict[str, Any]:
        """Summary without pixel data"""
        return {
            "id": self.id,
            "name": self.name,
            "width": self.buffer.width,
            "height": self.buffer.height,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "metadata": dict(self.metadata),
        }


class BufferStore:
    """
    Thread-safe store of pixel buffers.

    Oldest entries are evicted once max_buffers is reached. The lock protects
    the registry only; callers own a buffer exclusively while they mutate it.
    """

    def __init__(self, max_buffers: int = StoreConstants.DEFAULT_MAX_BUFFERS):
        """
        Initialize Buffer Store

        Args:
            max_buffers: Maximum number of buffers kept in memory
        """
        if max_buffers < 1:
            raise ValueError(f"max_buffers must be at least 1, got {max_buffers}")

        self.max_buffers = max_buffers
        self._buffers: "OrderedDict[str, StoredBuffer]" = OrderedDict()

        # Statistics
        self.total_created = 0
        self.evicted_count = 0

        # Thread safety (RLock allows reentrant locking)
        self.lock = RLock()

        logger.info(f"Buffer Store initialized with max size: {max_buffers}")

    def add(
        self,
        buffer: PixelBuffer,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Store a buffer

        Args:
            buffer: Buffer to store (ownership passes to the store)
            name: Optional display name
            metadata: Optional metadata (source, operation, ...)

        Returns:
            Buffer ID
        """
        with self.lock:
            buffer_id = f"buf_{uuid.uuid4().hex[:8]}"
            now = datetime.now()

            self._buffers[buffer_id] = StoredBuffer(
                id=buffer_id,
                buffer=buffer,
                name=name or buffer_id,
                created_at=now,
                updated_at=now,
                metadata=metadata or {},
            )
            self.total_created += 1

            while len(self._buffers) > self.max_buffers:
                evicted_id, _ = self._buffers.popitem(last=False)
                self.evicted_count += 1
                logger.info(f"Evicted buffer {evicted_id} (store full)")

            logger.debug(f"Stored buffer {buffer_id}: {buffer.width}x{buffer.height}")
            return buffer_id

    def get(self, buffer_id: str) -> StoredBuffer:
        """
        Get stored buffer by ID

        Raises:
            BufferNotFoundError: If no buffer has this ID
        """
        with self.lock:
            record = self._buffers.get(buffer_id)
            if record is None:
                raise BufferNotFoundError(buffer_id)
            return record

    def get_buffer(self, buffer_id: str) -> PixelBuffer:
        return self.get(buffer_id).buffer

    def replace(
        self, buffer_id: str, buffer: PixelBuffer, metadata: Optional[Dict[str, Any]] = None
    ) -> StoredBuffer:
        """Swap the pixel buffer stored under an existing ID"""
        with self.lock:
            record = self.get(buffer_id)
            record.buffer = buffer
            record.updated_at = datetime.now()
            if metadata:
                record.metadata.update(metadata)
            return record

    def touch(self, buffer_id: str, metadata: Optional[Dict[str, Any]] = None) -> StoredBuffer:
        """Mark a buffer as modified in place"""
        with self.lock:
            record = self.get(buffer_id)
            record.updated_at = datetime.now()
            if metadata:
                record.metadata.update(metadata)
            return record

    def contains(self, buffer_id: str) -> bool:
        with self.lock:
            return buffer_id in self._buffers

    def delete(self, buffer_id: str) -> None:
        with self.lock:
            if self._buffers.pop(buffer_id, None) is None:
                raise BufferNotFoundError(buffer_id)
            logger.info(f"Deleted buffer {buffer_id}")

    def list(self) -> List[StoredBuffer]:
        """All stored buffers, newest first"""
        with self.lock:
            return sorted(self._buffers.values(), key=lambda r: r.created_at, reverse=True)

    def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics"""
        with self.lock:
            total_pixels = sum(r.buffer.width * r.buffer.height for r in self._buffers.values())
            return {
                "count": len(self._buffers),
                "max_buffers": self.max_buffers,
                "total_created": self.total_created,
                "evicted": self.evicted_count,
                "total_pixels": total_pixels,
                "memory_bytes": total_pixels * 4,
            }

    def clear(self):
        """Remove all buffers"""
        with self.lock:
            self._buffers.clear()
            logger.info("Buffer store cleared")

    def __len__(self) -> int:
        with self.lock:
            return len(self._buffers)
