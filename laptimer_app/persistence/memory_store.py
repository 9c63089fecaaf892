"""In-process key-value store."""

import threading
from typing import Any, Mapping, Optional

from ..errors import PersistenceError
from .base import KeyValueStore, StoredValue


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store; contents live as long as the instance."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set_float(self, key: str, value: float) -> None:
        self._set(key, float(value))

    def get_float(self, key: str) -> Optional[float]:
        return self._get(key, float)

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))

    def get_bool(self, key: str) -> Optional[bool]:
        return self._get(key, bool)

    def set_bytes(self, key: str, value: bytes) -> None:
        self._set(key, bytes(value))

    def get_bytes(self, key: str) -> Optional[bytes]:
        return self._get(key, bytes)

    def set_many(self, values: Mapping[str, StoredValue]) -> None:
        converted = {}
        for key, value in values.items():
            if isinstance(value, bool):
                converted[key] = value
            elif isinstance(value, (bytes, bytearray)):
                converted[key] = bytes(value)
            else:
                converted[key] = float(value)

        with self._lock:
            self._data.update(converted)

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def _set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def _get(self, key: str, expected: type) -> Any:
        with self._lock:
            if key not in self._data:
                return None
            value = self._data[key]

        if not isinstance(value, expected):
            raise PersistenceError(
                f"Stored value for {key} is {type(value).__name__}, expected {expected.__name__}",
                operation="get",
                key=key
            )
        return value
