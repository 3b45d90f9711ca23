import math
from typing import Any


def clamp_score(value: Any) -> float:
    """
    Force an upstream classifier score into [0.0, 1.0].

    Out-of-range and infinite values snap to the nearest boundary.
    NaN, None and anything non-numeric count as 0.0, matching how the
    web client treated absent scores.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    except OverflowError:
        # Integers too large for a float
        return 1.0 if value > 0 else 0.0

    if math.isnan(score):
        return 0.0
    if score < 0.0:
        return 0.0
    if score > 1.0:
        return 1.0
    return score
