# test_scheduler.py

import math

import pytest

from scheduler import schedule_substeps


def test_zero_frame_time_schedules_nothing():
    plan = schedule_substeps(0.0, time_scale=1.0, max_stable_dt=0.008, max_substeps=64)
    assert plan.count == 0
    assert plan.substep_dt == 0.0
    assert not plan.clamped


@pytest.mark.parametrize("frame_time", [-0.5, float('nan'), float('inf')])
def test_invalid_frame_time_schedules_nothing(frame_time):
    assert schedule_substeps(frame_time, 1.0, 0.008, 64).count == 0


def test_substeps_are_equal_and_never_exceed_the_stable_size():
    plan = schedule_substeps(1 / 60, time_scale=1.0, max_stable_dt=0.008, max_substeps=64)
    assert plan.count == math.ceil((1 / 60) / 0.008) == 3
    assert plan.substep_dt <= 0.008
    assert plan.substep_dt * plan.count == pytest.approx(1 / 60)


def test_time_scale_multiplies_simulated_time():
    plan = schedule_substeps(0.02, time_scale=5.0, max_stable_dt=0.008, max_substeps=64)
    assert plan.count == math.ceil(0.1 / 0.008)
    assert plan.substep_dt * plan.count == pytest.approx(0.1)


def test_exact_multiple_does_not_add_a_step():
    plan = schedule_substeps(0.5, time_scale=1.0, max_stable_dt=0.25, max_substeps=64)
    assert plan.count == 2
    assert plan.substep_dt == 0.25


def test_large_frame_time_is_clamped():
    plan = schedule_substeps(1e6, time_scale=1.0, max_stable_dt=0.008, max_substeps=64)
    assert plan.count == 64
    assert plan.clamped
    assert plan.substep_dt == 0.008
