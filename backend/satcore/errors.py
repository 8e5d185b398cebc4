"""Exception types shared across the orbital core."""

from __future__ import annotations


class SatcoreError(Exception):
    """Base class for orbital core errors."""


class ElementSetError(SatcoreError, ValueError):
    """A two-line element set was malformed or rejected by sgp4."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class PropagationUnavailable(SatcoreError, RuntimeError):
    """SGP4 produced no usable state for an instant (decay, divergence)."""

    def __init__(self, name: str, code: int, message: str = ""):
        text = f"{name}: sgp4 error {code}"
        if message:
            text = f"{text} ({message})"
        super().__init__(text)
        self.name = name
        self.code = code


class CatalogFetchError(SatcoreError, RuntimeError):
    """Fetching a catalog from a remote source failed."""
