# scheduler.py

"""
Substep scheduling.

Turns one rendered frame's wall-clock duration into a number of fixed-size
integration substeps, so physics accuracy does not depend on the frame rate.
"""

import math
from collections import namedtuple

import constants

# substep_dt: simulation seconds per substep. count: substeps this frame.
# clamped: True when count hit the per-frame upper bound.
SubstepPlan = namedtuple('SubstepPlan', ['substep_dt', 'count', 'clamped'])

NO_SUBSTEPS = SubstepPlan(substep_dt=0.0, count=0, clamped=False)


def schedule_substeps(frame_delta_time: float, time_scale: float,
                      max_stable_dt: float = constants.MAX_STABLE_DT,
                      max_substeps: int = constants.MAX_SUBSTEPS) -> SubstepPlan:
    """
    Splits frame_delta_time * time_scale into equal substeps no larger than
    max_stable_dt.

    count = ceil(total / max_stable_dt), substep_dt = total / count.

    When count would exceed max_substeps (a stalled frame), it is clamped and
    each substep keeps the full max_stable_dt: the frame advances less simulated
    time than elapsed, but every step stays within the stable size.
    """
    if not (frame_delta_time > 0.0) or math.isinf(frame_delta_time):
        return NO_SUBSTEPS

    total_dt = frame_delta_time * time_scale
    if not (total_dt > 0.0):
        return NO_SUBSTEPS

    count = math.ceil(total_dt / max_stable_dt)
    if count > max_substeps:
        return SubstepPlan(substep_dt=max_stable_dt, count=max_substeps, clamped=True)

    return SubstepPlan(substep_dt=total_dt / count, count=count, clamped=False)
