"""
Decompression Configuration

Sizing policy for frames whose header does not record a content size.
"""

from typing import Final

from pydantic import model_validator

from zstd_buffers.types import StrictBaseModel

from .constants import GIB

HEURISTIC_RATIO: Final = 100
"""Assumed worst-case compression ratio when the content size is unknown."""

HEURISTIC_CEILING: Final = GIB
"""Upper bound on the buffer allocated for a frame of unknown size (1 GiB)."""

REGROW_CEILING: Final = 4 * GIB
"""Largest buffer the opt-in regrow loop will attempt (4 GiB)."""


class DecompressConfig(StrictBaseModel):
    """Runtime configuration for buffer decompression."""

    heuristic_ratio: int = HEURISTIC_RATIO
    """Multiplier applied to the compressed length to estimate the output size."""

    heuristic_ceiling: int = HEURISTIC_CEILING
    """Maximum estimated output size in bytes."""

    regrow_on_overflow: bool = False
    """Double and retry when an estimated buffer proves too small.

    Off by default: the native "destination too small" error is surfaced
    to the caller, who must retry with a larger buffer.
    """

    regrow_ceiling: int = REGROW_CEILING
    """Largest buffer in bytes the regrow loop may allocate."""

    @model_validator(mode="after")
    def _check_bounds(self) -> "DecompressConfig":
        if self.heuristic_ratio < 1:
            raise ValueError(f"heuristic_ratio must be >= 1, got {self.heuristic_ratio}")
        if self.heuristic_ceiling < 1:
            raise ValueError(f"heuristic_ceiling must be >= 1, got {self.heuristic_ceiling}")
        if self.regrow_ceiling < self.heuristic_ceiling:
            raise ValueError(
                f"regrow_ceiling ({self.regrow_ceiling}) must not be below "
                f"heuristic_ceiling ({self.heuristic_ceiling})"
            )
        return self


DEFAULT_CONFIG: Final = DecompressConfig()
"""Configuration used when callers do not pass one."""
