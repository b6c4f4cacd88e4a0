# forces.py

import logging

import numba
import numpy as np

logger = logging.getLogger("nbody_sim")

# --- JIT-Compiled Physics Functions ---
# These functions are compiled to machine code by Numba and operate only on
# NumPy arrays and simple scalar values, as required by Numba's nopython mode.

@numba.jit(nopython=True, parallel=True)
def _accumulate_accelerations_jit(positions, masses, accelerations, g_const, softening):
    """
    Direct pairwise summation of the softened Newtonian law.

    a_i = sum_{j != i} G * m_j * (p_j - p_i) / (|p_j - p_i|^2 + eps^2)^(3/2)

    The outer loop is distributed across Numba's worker threads. Iteration i
    reads the shared positions/masses snapshot and writes only accelerations[i],
    so no worker ever observes another worker's output.
    """
    num_bodies = positions.shape[0]
    softening_sq = softening * softening

    for i in numba.prange(num_bodies):
        p_x = positions[i, 0]
        p_y = positions[i, 1]
        acc_x = 0.0
        acc_y = 0.0
        for j in range(num_bodies):
            if j == i:
                continue
            diff_x = positions[j, 0] - p_x
            diff_y = positions[j, 1] - p_y
            dist_soft_sq = diff_x * diff_x + diff_y * diff_y + softening_sq
            inv_dist_soft_cubed = dist_soft_sq ** -1.5
            scale = g_const * masses[j] * inv_dist_soft_cubed
            acc_x += scale * diff_x
            acc_y += scale * diff_y
        accelerations[i, 0] = acc_x
        accelerations[i, 1] = acc_y

@numba.jit(nopython=True)
def _calculate_potential_energy_jit(positions, masses, g_const, softening):
    """
    Total softened potential energy, U = -sum_{i<j} G m_i m_j / sqrt(r^2 + eps^2).
    Consistent with the force law above.
    """
    num_bodies = positions.shape[0]
    softening_sq = softening * softening
    total_pe = 0.0
    for i in range(num_bodies):
        for j in range(i + 1, num_bodies):
            diff_x = positions[j, 0] - positions[i, 0]
            diff_y = positions[j, 1] - positions[i, 1]
            dist = np.sqrt(diff_x * diff_x + diff_y * diff_y + softening_sq)
            total_pe -= g_const * masses[i] * masses[j] / dist
    return total_pe


def max_softened_acceleration(mass: float, g_const: float, softening: float) -> float:
    """
    Upper bound of the acceleration a single body of `mass` can exert.
    G m r / (r^2 + eps^2)^(3/2) peaks at r = eps / sqrt(2).
    """
    return 2.0 * g_const * mass / (3.0 * np.sqrt(3.0) * softening * softening)


def configure_worker_threads(worker_threads):
    """
    Bounds the Numba worker pool used by the force accumulator.
    None leaves Numba's default (all available hardware threads).
    Returns the thread count in effect.
    """
    if worker_threads is not None:
        numba.set_num_threads(min(int(worker_threads), numba.config.NUMBA_NUM_THREADS))
    threads = numba.get_num_threads()
    logger.info(f"Force accumulator using {threads} worker thread(s).")
    return threads


class ForceAccumulator:
    """
    Computes the net gravitational acceleration on every body.

    Data Contract:
    - Inputs:
        - softening_length (float): eps in the softened law, > 0.
    - Outputs: compute() returns an (N, 2) array of accelerations.
    - Side Effects: None. The body store is only read.
    - Invariants: The returned buffer is fully written before compute() returns.
      It is reused between calls and is only valid until the next call.
    """
    def __init__(self, softening_length: float):
        self.softening_length = softening_length
        self._accelerations = np.zeros((0, 2), dtype=np.float64)

    def compute(self, positions: np.ndarray, masses: np.ndarray, g_const: float) -> np.ndarray:
        num_bodies = positions.shape[0]
        if self._accelerations.shape[0] != num_bodies:
            self._accelerations = np.zeros((num_bodies, 2), dtype=np.float64)

        _accumulate_accelerations_jit(
            positions,
            masses,
            self._accelerations,
            float(g_const),
            float(self.softening_length)
        )
        return self._accelerations

    def potential_energy(self, positions: np.ndarray, masses: np.ndarray, g_const: float) -> float:
        if positions.shape[0] < 2:
            return 0.0
        return float(_calculate_potential_energy_jit(
            positions, masses, float(g_const), float(self.softening_length)
        ))
