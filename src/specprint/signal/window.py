"""Analysis window construction."""

from __future__ import annotations

import numpy as np
from scipy.signal import get_window

from ..errors import InvalidArgumentError

RECTANGULAR_WINDOWS = frozenset({"boxcar", "rectangular", "rect", "none"})


def build_window(name: str | None, size: int) -> np.ndarray | None:
    """Return the ``size``-point window ``name``, or ``None`` if rectangular."""
    if name is None or name.lower() in RECTANGULAR_WINDOWS:
        return None
    try:
        window = get_window(name, size, fftbins=True)
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid window {name!r}: {exc}") from exc
    return np.asarray(window, dtype=np.float64)
