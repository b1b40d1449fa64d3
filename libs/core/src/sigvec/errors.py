"""Exception taxonomy shared by the executors and the provider adapters.

Adapters translate vendor exceptions into these classes so the executors can
tell a capability gap (skip) from a malformed signature (benign) from a real
defect (error).
"""


class SigvecError(Exception):
    """Base class for harness errors."""


class UnsupportedAlgorithm(SigvecError):
    """The provider does not know the requested algorithm name."""


class UnsupportedKey(SigvecError):
    """The encoded key uses parameters the provider cannot load (e.g. a curve)."""


class MalformedSignature(SigvecError):
    """The signature cannot even be parsed; callers treat it as not verified."""


class InvalidKey(SigvecError):
    """The key does not fit the primitive it was handed to."""


class SigningError(SigvecError):
    """The primitive refused to produce a signature."""


class VectorFormatError(SigvecError):
    """A test-vector document is missing a field or holds a bad value."""


class ConfigError(SigvecError):
    """An environment override holds an unusable value."""


class VerdictFailure(AssertionError):
    """Raised by Verdict.raise_for_failure so pytest reports a failed document."""
