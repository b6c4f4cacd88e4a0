# parameters.py

from dataclasses import dataclass

import constants


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class SimulationParameters:
    """
    The scalar knobs the core reads every frame.

    time_scale and gravity_strength are changed only through the set_*
    methods, which clamp into their configured ranges. softening_length is
    fixed for the run.
    """
    time_scale: float = 1.0
    gravity_strength: float = 1.0
    softening_length: float = constants.SOFTENING
    base_gravity: float = constants.BASE_G
    min_time_scale: float = constants.MIN_TIME_SCALE
    max_time_scale: float = constants.MAX_TIME_SCALE
    min_gravity_strength: float = constants.MIN_GRAVITY_STRENGTH
    max_gravity_strength: float = constants.MAX_GRAVITY_STRENGTH

    def __post_init__(self):
        self.time_scale = _clamp(self.time_scale, self.min_time_scale, self.max_time_scale)
        self.gravity_strength = _clamp(
            self.gravity_strength, self.min_gravity_strength, self.max_gravity_strength
        )

    @property
    def effective_gravity(self) -> float:
        """G0 * gravity_strength."""
        return self.base_gravity * self.gravity_strength

    def set_time_scale(self, multiplier: float) -> float:
        self.time_scale = _clamp(multiplier, self.min_time_scale, self.max_time_scale)
        return self.time_scale

    def set_gravity_strength(self, multiplier: float) -> float:
        self.gravity_strength = _clamp(
            multiplier, self.min_gravity_strength, self.max_gravity_strength
        )
        return self.gravity_strength

    @classmethod
    def from_config(cls, sim_config: dict) -> "SimulationParameters":
        return cls(
            time_scale=sim_config['time_scale'],
            gravity_strength=sim_config['gravity_strength'],
            softening_length=sim_config['softening_length'],
            base_gravity=sim_config['gravitational_constant'],
            min_time_scale=sim_config['min_time_scale'],
            max_time_scale=sim_config['max_time_scale'],
            min_gravity_strength=sim_config['min_gravity_strength'],
            max_gravity_strength=sim_config['max_gravity_strength'],
        )
