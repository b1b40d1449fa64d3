"""Adapter package for pyca/cryptography.

Importing the package registers the "pyca" provider.
"""

from .provider import PycaKeyFactory, PycaProvider, PycaSignature

__all__ = ["PycaKeyFactory", "PycaProvider", "PycaSignature"]
