"""Rise/set search by quadratic interpolation of sampled altitudes.

Used for bodies without a closed-form rise/set solution (the Moon). The day
is covered by twelve 2-hour windows; in each window a parabola is fitted
through three altitude samples and its zero crossings are classified as
rise or set. Method from http://www.stargazing.net/kepler/moonrise.html.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import numpy as np

from .datatypes import AltitudeSample, RiseSetResult
from .timeconv import hours_later, require_aware

__all__ = ["QuadraticWindow", "fit_window", "find_rise_set"]

LOGGER = logging.getLogger(__name__)

AltitudeFunction = Callable[[datetime], float]


@dataclass(frozen=True)
class QuadraticWindow:
    """Parabola through samples at x = -1, 0, 1 and its roots in [-1, 1].

    ``x1`` is the root to use when ``roots == 1``. ``edge_y`` is the
    parabola's extreme value restricted to the sampled window.
    """

    vertex_x: float
    vertex_y: float
    edge_y: float
    roots: int
    x1: float
    x2: float


def fit_window(h0: float, h1: float, h2: float) -> QuadraticWindow:
    a = (h0 + h2) / 2 - h1
    b = (h2 - h0) / 2

    if a == 0.0:
        # Samples are collinear.
        if b == 0.0:
            return QuadraticWindow(0.0, h1, h1, 0, math.nan, math.nan)
        x = -h1 / b
        roots = 1 if abs(x) <= 1 else 0
        return QuadraticWindow(0.0, h1, h1, roots, x, x)

    xe = -b / (2 * a)
    ye = (a * xe + b) * xe + h1
    xc = float(np.clip(xe, -1.0, 1.0))
    edge_y = (a * xc + b) * xc + h1
    d = b * b - 4 * a * h1

    roots = 0
    x1 = x2 = math.nan
    if d >= 0:
        dx = math.sqrt(d) / (abs(a) * 2)
        x1 = xe - dx
        x2 = xe + dx
        if abs(x1) <= 1:
            roots += 1
        if abs(x2) <= 1:
            roots += 1
        if x1 < -1:
            x1 = x2
    return QuadraticWindow(xe, ye, edge_y, roots, x1, x2)


def find_rise_set(
    altitude_fn: AltitudeFunction,
    start: datetime,
    threshold: float = 0.0,
) -> RiseSetResult:
    """Find the crossings of *threshold* by *altitude_fn* in the 24 hours after *start*.

    Parameters
    ----------
    altitude_fn:
        Altitude in radians of the body at a given instant.
    start:
        Timezone-aware beginning of the search window, usually midnight.
    threshold:
        Altitude in radians whose crossings count as rise and set.

    Returns
    -------
    RiseSetResult
        Rise and/or set instants, or ``always_above``/``always_below``
        when the body does not cross the threshold during the window.
    """

    require_aware(start)

    def sample(hours: float) -> AltitudeSample:
        return AltitudeSample(hours, altitude_fn(hours_later(start, hours)) - threshold)

    rise: Optional[float] = None
    set_: Optional[float] = None
    window: Optional[QuadraticWindow] = None

    h0 = sample(0)
    for i in range(1, 24, 2):
        h1 = sample(i)
        h2 = sample(i + 1)
        window = fit_window(h0.altitude, h1.altitude, h2.altitude)

        if window.roots == 1:
            if h0.altitude < 0:
                rise = i + window.x1
            else:
                set_ = i + window.x1
        elif window.roots == 2:
            rise = i + (window.x2 if window.vertex_y < 0 else window.x1)
            set_ = i + (window.x1 if window.vertex_y < 0 else window.x2)

        LOGGER.debug(
            json.dumps(
                {
                    "event": "solver_window",
                    "hour": i,
                    "roots": window.roots,
                    "vertex_y": window.vertex_y,
                }
            )
        )

        if rise is not None and set_ is not None:
            break
        h0 = h2

    if rise is None and set_ is None:
        if window is not None and window.edge_y > 0:
            return RiseSetResult.always_above_result()
        return RiseSetResult.always_below_result()

    return RiseSetResult.from_events(
        hours_later(start, rise) if rise is not None else None,
        hours_later(start, set_) if set_ is not None else None,
    )
