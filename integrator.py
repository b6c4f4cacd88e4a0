# integrator.py

import numba
import numpy as np

@numba.jit(nopython=True)
def _semi_implicit_euler_jit(positions, velocities, accelerations, dt, first_free, max_speed):
    """
    v(t+dt) = v(t) + a(t) dt
    p(t+dt) = p(t) + v(t+dt) dt

    Bodies with index < first_free are left untouched (pinned).
    A max_speed <= 0 disables the speed cap.
    """
    num_bodies = positions.shape[0]
    for i in range(first_free, num_bodies):
        vel_x = velocities[i, 0] + accelerations[i, 0] * dt
        vel_y = velocities[i, 1] + accelerations[i, 1] * dt

        if max_speed > 0.0:
            speed = np.sqrt(vel_x * vel_x + vel_y * vel_y)
            if speed > max_speed:
                vel_x *= max_speed / speed
                vel_y *= max_speed / speed

        velocities[i, 0] = vel_x
        velocities[i, 1] = vel_y
        positions[i, 0] += vel_x * dt
        positions[i, 1] += vel_y * dt


class Integrator:
    """
    Symplectic (semi-implicit) Euler integrator.

    The position update uses the freshly updated velocity, which keeps long-run
    energy drift bounded. Only positions and velocities are written.

    - pin_central_body: when True, body 0 is never moved.
    - max_speed: optional speed cap, None to disable.
    """
    def __init__(self, pin_central_body: bool = False, max_speed=None):
        self.pin_central_body = pin_central_body
        self.max_speed = max_speed

    def advance(self, store, accelerations: np.ndarray, dt: float):
        first_free = 1 if self.pin_central_body else 0
        _semi_implicit_euler_jit(
            store.positions,
            store.velocities,
            accelerations,
            float(dt),
            first_free,
            float(self.max_speed) if self.max_speed is not None else 0.0
        )
