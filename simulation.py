# simulation.py

import logging
from enum import Enum

import numpy as np

import constants
from body_store import Body, BodyStore, BodyView
from forces import ForceAccumulator
from initial_conditions import generate_bodies
from integrator import Integrator
from parameters import SimulationParameters
from scheduler import NO_SUBSTEPS, schedule_substeps

logger = logging.getLogger("nbody_sim")


class SimulationState(Enum):
    RUNNING = "running"
    EXITED = "exited"


class Simulation:
    """
    The physics core. Owns the Body Store and advances it frame by frame.

    Data Contract:
    - Inputs:
        - store (BodyStore): The initial state. Ownership passes to the simulation.
        - params (SimulationParameters): Scalars read at the start of every frame.
        - max_stable_dt (float): Largest allowed integration substep.
        - max_substeps (int): Upper bound on substeps per frame.
        - pin_central_body (bool): Keep body 0 fixed at its starting position.
        - max_speed (float | None): Optional speed cap applied by the integrator.
    - Outputs: None. step() mutates the store in place; bodies() exposes it read-only.
    - Side Effects: Logs a warning whenever a frame's substep count is clamped.
    - Invariants:
        - The number of bodies never changes.
        - Within a substep every acceleration is computed from the same positions
          before the integrator writes any of them.
        - Once EXITED, step() is a no-op.
    """
    def __init__(self, store: BodyStore, params: SimulationParameters,
                 max_stable_dt: float = constants.MAX_STABLE_DT,
                 max_substeps: int = constants.MAX_SUBSTEPS,
                 pin_central_body: bool = False, max_speed=None):
        self.store = store
        self.params = params
        self.max_stable_dt = max_stable_dt
        self.max_substeps = max_substeps
        self.forces = ForceAccumulator(params.softening_length)
        self.integrator = Integrator(pin_central_body=pin_central_body, max_speed=max_speed)
        self.state = SimulationState.RUNNING
        self.simulated_time = 0.0
        self.frame_count = 0
        self.last_plan = NO_SUBSTEPS

        if pin_central_body:
            self.store.velocities[0] = 0.0

        logger.info(
            f"Simulation created: {len(store)} bodies, time_scale={params.time_scale}, "
            f"gravity_strength={params.gravity_strength}, softening={params.softening_length}, "
            f"max_stable_dt={max_stable_dt}, max_substeps={max_substeps}, "
            f"pin_central_body={pin_central_body}."
        )

    @classmethod
    def from_config(cls, sim_config: dict, rng: np.random.Generator) -> "Simulation":
        """Builds parameters and initial conditions from a validated 'simulation' section."""
        params = SimulationParameters.from_config(sim_config)
        store = generate_bodies(sim_config, rng, params.effective_gravity)
        return cls(
            store,
            params,
            max_stable_dt=sim_config['max_stable_dt'],
            max_substeps=sim_config['max_substeps'],
            pin_central_body=sim_config['pin_central_body'],
            max_speed=sim_config['max_speed'],
        )

    @property
    def is_running(self) -> bool:
        return self.state is SimulationState.RUNNING

    def exit(self):
        if self.is_running:
            self.state = SimulationState.EXITED
            logger.info(f"Simulation exited after {self.frame_count} frames, t={self.simulated_time:.3f}.")

    def step(self, frame_delta_time: float):
        """
        Advances the store by one rendered frame's worth of simulation time.

        The substep plan is derived from the parameters as they stand at the
        start of the call. Each substep computes every acceleration from the
        current positions and only then integrates.
        """
        if not self.is_running:
            return

        plan = schedule_substeps(
            frame_delta_time, self.params.time_scale, self.max_stable_dt, self.max_substeps
        )
        self.last_plan = plan
        self.frame_count += 1
        if plan.clamped:
            logger.warning(
                f"Frame of {frame_delta_time:.3f}s needed more than {self.max_substeps} substeps; "
                f"simulation is running behind real time."
            )

        g_const = self.params.effective_gravity
        for _ in range(plan.count):
            accelerations = self.forces.compute(self.store.positions, self.store.masses, g_const)
            self.integrator.advance(self.store, accelerations, plan.substep_dt)
        self.simulated_time += plan.count * plan.substep_dt

    def bodies(self) -> BodyView:
        return self.store.view()

    def set_time_scale(self, multiplier: float) -> float:
        value = self.params.set_time_scale(multiplier)
        logger.debug(f"Time scale set to {value:.3f}x")
        return value

    def set_gravity_strength(self, multiplier: float) -> float:
        value = self.params.set_gravity_strength(multiplier)
        logger.debug(f"Gravity strength set to {value:.3f}x")
        return value

    # --- Diagnostics ---

    def get_total_kinetic_energy(self) -> float:
        """KE = sum(0.5 * m * v^2)"""
        vel_sq = np.sum(self.store.velocities**2, axis=1)
        return float(np.sum(0.5 * self.store.masses * vel_sq))

    def get_total_potential_energy(self) -> float:
        return self.forces.potential_energy(
            self.store.positions, self.store.masses, self.params.effective_gravity
        )

    def get_total_energy(self) -> float:
        return self.get_total_kinetic_energy() + self.get_total_potential_energy()

    def get_total_momentum(self) -> np.ndarray:
        return np.sum(self.store.masses[:, np.newaxis] * self.store.velocities, axis=0)

    def get_center_of_mass(self) -> np.ndarray:
        weighted = np.sum(self.store.masses[:, np.newaxis] * self.store.positions, axis=0)
        return weighted / self.store.total_mass

    def central_body(self) -> Body:
        """Copy of body 0's record, for tracking how far the central mass drifts."""
        return self.store.body(0)
