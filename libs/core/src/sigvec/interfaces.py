from __future__ import annotations
from typing import Any, Protocol

"""Collaborator interfaces used by the executors.

Adapters implement these Protocols and register themselves into the global
registry. The executors interact only with these interfaces, never with vendor
libraries directly.
"""


class Primitive(Protocol):
    """A stateful signature object resolved from a composed algorithm name."""
    name: str
    def init_verify(self, key: Any) -> None: ...
    def init_sign(self, key: Any) -> None: ...
    def update(self, data: bytes) -> None: ...
    def verify(self, signature: bytes) -> bool: ...
    def sign(self) -> bytes: ...


class KeyFactory(Protocol):
    """Turns encoded keys into provider key objects."""
    name: str
    def public_key_from(self, encoded: bytes) -> Any: ...
    def private_key_from(self, encoded: bytes) -> Any: ...


class Provider(Protocol):
    """Entry point of an adapter.

    `signature` raises UnsupportedAlgorithm for unknown names; `key_factory`
    raises UnsupportedAlgorithm for unknown key types.
    """
    name: str
    def signature(self, name: str) -> Primitive: ...
    def key_factory(self, name: str) -> KeyFactory: ...
