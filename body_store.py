# body_store.py

import logging
from collections import namedtuple

import numpy as np

import constants

logger = logging.getLogger("nbody_sim")

# A single body record, as handed out to callers that want one body at a time.
Body = namedtuple('Body', ['position', 'velocity', 'mass', 'radius'])

# Read-only arrays over the whole store. Handed to the renderer every frame.
BodyView = namedtuple('BodyView', ['positions', 'velocities', 'masses', 'radii'])


def radius_from_mass(masses, scale: float = constants.RADIUS_SCALE):
    """
    Maps mass to a drawn radius: scale * cbrt(mass).
    Monotonically increasing and positive for every positive mass.
    """
    return scale * np.cbrt(np.asarray(masses, dtype=np.float64))


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.setflags(write=False)
    return view


class BodyStore:
    """
    Owns the full simulation state as a Structure of Arrays.

    Data Contract:
    - Inputs:
        - positions (array-like, shape (N, 2)): world-space positions.
        - velocities (array-like, shape (N, 2)): world-space velocities.
        - masses (array-like, shape (N,)): strictly positive masses.
    - Outputs: None. The integrator mutates positions and velocities in place.
    - Side Effects: None.
    - Invariants:
        - N is fixed for the lifetime of the store.
        - Every mass is > 0.
        - radii are derived from masses once, here, and never change.
        - Index 0 holds the central mass by convention.
    """
    def __init__(self, positions, velocities, masses):
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        masses = np.array(masses, dtype=np.float64)

        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f"positions must have shape (N, 2), got {positions.shape}")
        if velocities.shape != positions.shape:
            raise ValueError(
                f"velocities shape {velocities.shape} does not match positions shape {positions.shape}"
            )
        if masses.shape != (positions.shape[0],):
            raise ValueError(
                f"masses must have shape ({positions.shape[0]},), got {masses.shape}"
            )
        if not np.all(masses > 0):
            raise ValueError("every body must have a strictly positive mass")

        self.positions = positions
        self.velocities = velocities
        self.masses = masses
        self.radii = radius_from_mass(masses)

        logger.debug(f"BodyStore created with {len(self)} bodies, total mass {self.total_mass:.2f}.")

    def __len__(self):
        return self.positions.shape[0]

    @property
    def total_mass(self) -> float:
        return float(np.sum(self.masses))

    def body(self, index: int) -> Body:
        """Returns a copy of one body's record."""
        return Body(
            position=self.positions[index].copy(),
            velocity=self.velocities[index].copy(),
            mass=float(self.masses[index]),
            radius=float(self.radii[index]),
        )

    def view(self) -> BodyView:
        """Returns read-only views of every array. Writes through the view raise."""
        return BodyView(
            positions=_read_only(self.positions),
            velocities=_read_only(self.velocities),
            masses=_read_only(self.masses),
            radii=_read_only(self.radii),
        )

    def snapshot(self) -> "BodyStore":
        """Returns an independent deep copy of the store."""
        return BodyStore(self.positions.copy(), self.velocities.copy(), self.masses.copy())
