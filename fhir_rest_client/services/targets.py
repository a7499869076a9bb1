"""
Decode targets: where and how a response body ends up.

The caller picks a target explicitly. After a successful call the decoded
value is available as `target.value`.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


class Target(ABC):
    """Base class for decode targets."""

    def __init__(self) -> None:
        self.value: Any = None

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Decode a response body and store it as the target value."""


class RawBytes(Target):
    """Keep the response body verbatim, without JSON parsing."""

    def decode(self, data: bytes) -> bytes:
        self.value = bytes(data)
        return self.value


class DecodeInto(Target, Generic[T]):
    """Decode the JSON body into one value of the given type.

    The type can be anything pydantic can validate: a BaseModel subclass,
    a dataclass, a TypedDict, dict, or Any for plain JSON values.
    """

    def __init__(self, type_: Any = Any) -> None:
        super().__init__()
        self.type_ = type_
        self._adapter: TypeAdapter = TypeAdapter(type_)

    def decode(self, data: bytes) -> T:
        self.value = self._adapter.validate_json(data)
        return self.value


class DecodeManyInto(Target, Generic[T]):
    """Decode into a list of values of the given type.

    Used directly, the JSON body must be an array. Reference resolution
    appends one decoded value per resolved reference instead.
    """

    def __init__(self, type_: Any = Any) -> None:
        super().__init__()
        self.type_ = type_
        self.value: list[T] = []
        self._adapter: TypeAdapter = TypeAdapter(list[type_])

    def decode(self, data: bytes) -> list[T]:
        self.value = self._adapter.validate_json(data)
        return self.value
