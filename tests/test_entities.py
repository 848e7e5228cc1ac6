import math

import pytest

from dogfight.entities import (
    AcceleratorEnemy,
    Enemy,
    EvasiveEnemy,
    Missile,
    StraightEnemy,
    SwoopEnemy,
    ZigzagEnemy,
)


def test_straight_drifts_down():
    e = StraightEnemy(x=100, y=0, vy=40)
    e.advance(0.5, [])
    assert (e.x, e.y) == (100, 20)


def test_zigzag_swings_with_phase():
    e = ZigzagEnemy(x=100, y=0, vy=40, amplitude=50, frequency=2)
    e.advance(0.1, [])
    assert e.phase == pytest.approx(0.2)
    assert e.x == pytest.approx(100 + math.sin(0.2) * 50 * 0.1)
    assert e.y == pytest.approx(4.0)


def test_accelerator_speeds_up_without_cap():
    e = AcceleratorEnemy(x=100, y=0, vy=20, acceleration=40)
    for _ in range(100):
        e.advance(0.05, [])
    assert e.vy == pytest.approx(20 + 40 * 5)
    assert e.y > 0


def test_accelerator_integrates_new_velocity():
    e = AcceleratorEnemy(x=100, y=0, vy=20, acceleration=40)
    e.advance(0.5, [])
    assert e.vy == pytest.approx(40)
    assert e.y == pytest.approx(20)


def test_swoop_lurches_per_frame():
    e = SwoopEnemy(x=200, y=0, vy=50, swoop_frequency=2)
    e.advance(0.05, [])
    s = math.sin(0.1)
    assert e.x == pytest.approx(200 + s * 20 * 0.05 * 60)
    assert e.y == pytest.approx(50 * 0.05 + abs(s) * 10)


def test_evasive_dodges_away_from_missile():
    e = EvasiveEnemy(x=200, y=100, vy=0, evade_speed=100)
    e.advance(0.1, [Missile(x=180, y=150, vy=-380)])
    assert e.x == pytest.approx(210)

    e = EvasiveEnemy(x=200, y=100, vy=0, evade_speed=100)
    e.advance(0.1, [Missile(x=220, y=150, vy=-380)])
    assert e.x == pytest.approx(190)


def test_evasive_sums_threats():
    e = EvasiveEnemy(x=200, y=100, vy=0, evade_speed=100)
    missiles = [Missile(x=170, y=150, vy=-380), Missile(x=190, y=120, vy=-380)]
    assert e.dodge_direction(missiles) == 2
    e.advance(0.1, missiles)
    assert e.x == pytest.approx(220)


def test_evasive_cancelling_threats():
    e = EvasiveEnemy(x=200, y=100, vy=0, evade_speed=100)
    assert e.dodge_direction([Missile(x=180, y=150, vy=-1), Missile(x=220, y=150, vy=-1)]) == 0


@pytest.mark.parametrize("missile", [
    Missile(x=260, y=150, vy=-380),   # |dx| == 60
    Missile(x=200, y=180, vy=-380),   # 80 below
    Missile(x=200, y=-100, vy=-380),  # 200 ahead
    Missile(x=190, y=150, vy=-380, owner="enemy"),
    Missile(x=190, y=150, vy=-380, alive=False),
])
def test_evasive_ignores_missiles_outside_window(missile):
    e = EvasiveEnemy(x=200, y=100, vy=0, evade_speed=100)
    assert e.dodge_direction([missile]) == 0


def test_base_enemy_has_no_motion_rule():
    with pytest.raises(NotImplementedError):
        Enemy(x=0, y=0, vy=0).advance(0.1, [])
