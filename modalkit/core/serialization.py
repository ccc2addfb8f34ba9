"""Base class for outputs that can be written as JSON."""

from abc import ABC, abstractmethod


class JsonSerializable(ABC):
    """An output that has a JSON text form and a UTF-8 byte form."""

    @abstractmethod
    def to_json(self) -> str:
        """Return the JSON representation, newline terminated."""

    def to_bytes(self) -> bytes:
        """Return ``to_json()`` encoded as UTF-8."""
        return self.to_json().encode("utf-8")
