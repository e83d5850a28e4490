import math
from typing import Union

import numpy as np
import numpy.typing as npt


def round_half_up(value: Union[float, npt.NDArray], decimals: int = 2) -> Union[float, npt.NDArray]:
    """Round to `decimals` places with halves going up (not to even)."""
    shift = 10.0 ** decimals
    if isinstance(value, np.ndarray):
        return np.floor(value * shift + 0.5) / shift
    return math.floor(float(value) * shift + 0.5) / shift


def format_number(value: float) -> str:
    """Format a number without a trailing '.0' for integral values."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)
