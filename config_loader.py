# config_loader.py

import json
import logging
import math

import constants
from initial_conditions import DISTRIBUTIONS

# Values used when the 'simulation' section leaves a key out.
SIMULATION_DEFAULTS = {
    'body_count': constants.NUM_BODIES,
    'central_mass': constants.CENTRAL_MASS,
    'min_mass': constants.MIN_MASS,
    'max_mass': constants.MAX_MASS,
    'orbit_distribution': "shells",
    'shell_count': constants.SHELL_COUNT,
    'shell_spacing': constants.SHELL_SPACING,
    'shell_jitter': constants.SHELL_JITTER,
    'min_orbit_radius': constants.SHELL_SPACING,
    'max_orbit_radius': constants.SHELL_SPACING * constants.SHELL_COUNT,
    'speed_factor_range': [1.0, 1.0],
    'radial_velocity_range': [0.0, 0.0],
    'gravitational_constant': constants.BASE_G,
    'softening_length': constants.SOFTENING,
    'max_stable_dt': constants.MAX_STABLE_DT,
    'max_substeps': constants.MAX_SUBSTEPS,
    'time_scale': 1.0,
    'min_time_scale': constants.MIN_TIME_SCALE,
    'max_time_scale': constants.MAX_TIME_SCALE,
    'gravity_strength': 1.0,
    'min_gravity_strength': constants.MIN_GRAVITY_STRENGTH,
    'max_gravity_strength': constants.MAX_GRAVITY_STRENGTH,
    'pin_central_body': False,
    'max_speed': None,
    'worker_threads': None,
}


class ConfigError(ValueError):
    """Raised at startup when the configuration cannot describe a valid run."""


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _require_positive(sim_config: dict, key: str):
    value = sim_config[key]
    if not _is_number(value) or value <= 0:
        raise ConfigError(f"simulation.{key} must be a positive number, got {value!r}")


def _require_positive_int(sim_config: dict, key: str):
    value = sim_config[key]
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"simulation.{key} must be a positive integer, got {value!r}")


def _require_range(sim_config: dict, key: str):
    value = sim_config[key]
    if (not isinstance(value, (list, tuple)) or len(value) != 2
            or not all(_is_number(v) for v in value) or value[0] > value[1]):
        raise ConfigError(f"simulation.{key} must be a [low, high] pair with low <= high, got {value!r}")


def _require_ordered(sim_config: dict, low_key: str, high_key: str):
    if sim_config[low_key] > sim_config[high_key]:
        raise ConfigError(
            f"simulation.{low_key} ({sim_config[low_key]}) must not exceed "
            f"simulation.{high_key} ({sim_config[high_key]})"
        )


def _require_within(sim_config: dict, key: str, low_key: str, high_key: str):
    if not sim_config[low_key] <= sim_config[key] <= sim_config[high_key]:
        raise ConfigError(
            f"simulation.{key} ({sim_config[key]}) must lie within "
            f"[{sim_config[low_key]}, {sim_config[high_key]}]"
        )


def validate_simulation_config(sim_config: dict) -> dict:
    """
    Fills defaults and checks the 'simulation' section.

    Data Contract:
    - Inputs: sim_config (dict) - The raw 'simulation' section.
    - Outputs: A new dict with every key of SIMULATION_DEFAULTS present.
    - Side Effects: None.
    - Invariants: Raises ConfigError naming the first offending key.
    """
    if not isinstance(sim_config, dict):
        raise ConfigError(f"simulation must be a dictionary, got {sim_config!r}")

    unknown = set(sim_config) - set(SIMULATION_DEFAULTS)
    if unknown:
        raise ConfigError(f"Unknown simulation keys: {sorted(unknown)}")

    merged = dict(SIMULATION_DEFAULTS)
    merged.update(sim_config)

    _require_positive_int(merged, 'body_count')
    _require_positive_int(merged, 'max_substeps')
    for key in ('central_mass', 'min_mass', 'max_mass', 'gravitational_constant',
                'softening_length', 'max_stable_dt', 'time_scale', 'min_time_scale',
                'max_time_scale', 'gravity_strength', 'min_gravity_strength',
                'max_gravity_strength'):
        _require_positive(merged, key)

    _require_ordered(merged, 'min_mass', 'max_mass')
    _require_ordered(merged, 'min_time_scale', 'max_time_scale')
    _require_ordered(merged, 'min_gravity_strength', 'max_gravity_strength')
    _require_within(merged, 'time_scale', 'min_time_scale', 'max_time_scale')
    _require_within(merged, 'gravity_strength', 'min_gravity_strength', 'max_gravity_strength')
    _require_range(merged, 'speed_factor_range')
    _require_range(merged, 'radial_velocity_range')
    if merged['speed_factor_range'][0] <= 0:
        raise ConfigError("simulation.speed_factor_range must be strictly positive")

    distribution = merged['orbit_distribution']
    if distribution not in DISTRIBUTIONS:
        raise ConfigError(
            f"simulation.orbit_distribution must be one of {DISTRIBUTIONS}, got {distribution!r}"
        )
    if distribution == "shells":
        _require_positive_int(merged, 'shell_count')
        _require_positive(merged, 'shell_spacing')
        if not _is_number(merged['shell_jitter']) or not 0 <= merged['shell_jitter'] < merged['shell_spacing']:
            raise ConfigError("simulation.shell_jitter must be in [0, shell_spacing)")
    else:
        _require_positive(merged, 'min_orbit_radius')
        _require_positive(merged, 'max_orbit_radius')
        _require_ordered(merged, 'min_orbit_radius', 'max_orbit_radius')

    if not isinstance(merged['pin_central_body'], bool):
        raise ConfigError("simulation.pin_central_body must be true or false")
    if merged['max_speed'] is not None:
        _require_positive(merged, 'max_speed')
    if merged['worker_threads'] is not None:
        _require_positive_int(merged, 'worker_threads')

    return merged


def validate_logging_config(log_config) -> dict:
    """Checks the 'logging' section: a known level name and a format string."""
    if not isinstance(log_config, dict):
        raise ConfigError(f"logging must be a dictionary, got {log_config!r}")
    for key in ('level', 'format'):
        if key not in log_config:
            raise ConfigError(f"logging is missing required key {key!r}")
    level = log_config['level']
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"logging.level must be a logging level name such as 'INFO', got {level!r}")
    if not isinstance(log_config['format'], str):
        raise ConfigError(f"logging.format must be a string, got {log_config['format']!r}")
    return log_config


def load_config(config_path='config.json') -> dict:
    """
    Reads the JSON configuration file and validates it.
    Returns the whole config with the validated 'simulation' section in place.

    Every problem, from a missing file to a bad value, surfaces as ConfigError
    so the caller can report it before anything else is set up.
    """
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read configuration from {config_path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_path} must be a JSON object")

    for key in ('run_id', 'master_seed', 'logging'):
        if key not in config:
            raise ConfigError(f"Configuration is missing required key {key!r}")

    run_id = config['run_id']
    if not isinstance(run_id, str) or not run_id:
        raise ConfigError(f"run_id must be a non-empty string, got {run_id!r}")
    seed = config['master_seed']
    if not isinstance(seed, int) or isinstance(seed, bool) or seed < 0:
        raise ConfigError(f"master_seed must be a non-negative integer, got {seed!r}")

    validate_logging_config(config['logging'])
    config['simulation'] = validate_simulation_config(config.get('simulation', {}))
    return config
