from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from .errors import UnsupportedAlgorithm, UnsupportedKey, VectorFormatError
from .vectors import KeyDescriptor

log = logging.getLogger(__name__)

# Key factories are named after the key type, not the signature scheme.
_PUBLIC_FACTORY_NAMES = {
    "ECDSA": "EC",
}


def key_factory_name(algorithm: str) -> str:
    return _PUBLIC_FACTORY_NAMES.get(algorithm, algorithm)


def public_key(provider: Any, descriptor: KeyDescriptor, algorithm: str) -> Tuple[Optional[Any], Optional[str]]:
    """Load the group's verification key; ``(None, reason)`` means skip the group."""
    try:
        encoded = descriptor.public_der()
    except VectorFormatError as exc:
        return None, f"Unreadable public key: {exc}"
    if encoded is None:
        return None, "Missing keyDer/keyPem"
    try:
        factory = provider.key_factory(key_factory_name(algorithm))
        return factory.public_key_from(encoded), None
    except (UnsupportedAlgorithm, UnsupportedKey) as exc:
        log.debug("public key rejected (curve=%s): %s", descriptor.curve, exc)
        return None, f"Public key construction failed: {exc}"


def private_key(provider: Any, descriptor: KeyDescriptor, algorithm: str) -> Tuple[Optional[Any], Optional[str]]:
    """Load the group's signing key; ``(None, reason)`` means skip the group."""
    try:
        encoded = descriptor.private_der()
    except VectorFormatError as exc:
        return None, f"Unreadable private key: {exc}"
    if encoded is None:
        return None, "Missing privateKeyPkcs8/privateKeyPem"
    try:
        factory = provider.key_factory(algorithm)
        return factory.private_key_from(encoded), None
    except (UnsupportedAlgorithm, UnsupportedKey) as exc:
        log.debug("private key rejected: %s", exc)
        return None, f"Private key construction failed: {exc}"
