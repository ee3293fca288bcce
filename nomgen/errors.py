"""Exception types raised while building a genesis snapshot.

Every error is fatal for the run. Nothing is retried and no partial
artifact is written; the operator fixes the input and runs again.
"""

from __future__ import annotations


class GenesisError(Exception):
    """Base exception for genesis generation."""


class InputFormatError(GenesisError, ValueError):
    """A flag value or CSV row does not have the expected shape."""


class AddressValidationError(GenesisError, ValueError):
    """An address cannot be parsed or is not allowed in this position."""


class RangeError(GenesisError, ValueError):
    """An amount lies outside its permitted bounds."""


class DuplicateError(GenesisError, ValueError):
    """An address or derived id was reused where it must be unique."""


class SupplyOverflowError(GenesisError, ValueError):
    """Minting would push a token past its maximum supply."""


class InvariantError(GenesisError, ValueError):
    """Assembled state does not reconcile."""


class ArtifactWriteError(GenesisError, OSError):
    """The genesis artifact could not be written."""


__all__ = [
    "GenesisError",
    "InputFormatError",
    "AddressValidationError",
    "RangeError",
    "DuplicateError",
    "SupplyOverflowError",
    "InvariantError",
    "ArtifactWriteError",
]
