"""Base class for key-value persistence backends."""

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Union

StoredValue = Union[bool, float, bytes]


class KeyValueStore(ABC):
    """
    Typed key-value persistence port.

    Getters return None for keys that were never written. Backends raise
    ``PersistenceError`` when storage is unavailable.
    """

    @abstractmethod
    def set_float(self, key: str, value: float) -> None:
        pass

    @abstractmethod
    def get_float(self, key: str) -> Optional[float]:
        pass

    @abstractmethod
    def set_bool(self, key: str, value: bool) -> None:
        pass

    @abstractmethod
    def get_bool(self, key: str) -> Optional[bool]:
        pass

    @abstractmethod
    def set_bytes(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def get_bytes(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing a missing key is not an error."""
        pass

    def set_many(self, values: Mapping[str, StoredValue]) -> None:
        """
        Write several keys, typed by their Python values.

        This default writes one key at a time. Backends that can commit the
        whole batch at once override it so readers never see a partial write.
        """
        for key, value in values.items():
            # bool is checked first since it is also an int
            if isinstance(value, bool):
                self.set_bool(key, value)
            elif isinstance(value, (bytes, bytearray)):
                self.set_bytes(key, bytes(value))
            else:
                self.set_float(key, value)

    def health_check(self) -> bool:
        """Check if the backend is usable."""
        return True
