"""Exception types raised across the engine.

Geometry degeneracies never raise (they fall back to documented defaults)
and optimizer failures are recovered inside the channel, so only these
surface to callers.
"""

from __future__ import annotations


class PhilgenError(Exception):
    """Base class for all philgen errors."""


class OutlineError(PhilgenError):
    """Missing or malformed outline descriptor (fatal to the requesting layer only)."""


class TessellationError(PhilgenError):
    """Every cell of a tessellation failed to intersect the outline."""


class ArtifactError(PhilgenError):
    """A trait generator returned something that is not a usable layer artifact."""


class NothingToExportError(PhilgenError):
    """Export was requested for a composition with zero surviving layers."""
