import pytest

from dogfight.challenge import generate_roster, pick_enemy_kind
from dogfight.entities import (
    AcceleratorEnemy,
    EnemyKind,
    EvasiveEnemy,
    StraightEnemy,
    SwoopEnemy,
    ZigzagEnemy,
)
from dogfight.rng import Mulberry32, derive_seed, seed_from_key

WIDTH = 480


def test_roster_for_2025_10_02():
    roster = generate_roster(Mulberry32(seed_from_key("2025-10-02")), WIDTH)

    assert [e.kind for e in roster] == [
        EnemyKind.STRAIGHT,
        EnemyKind.ZIGZAG,
        EnemyKind.EVASIVE,
        EnemyKind.STRAIGHT,
        EnemyKind.ACCELERATOR,
    ]
    assert [e.x for e in roster] == [299, 320, 92, 274, 135]
    assert [e.y for e in roster] == [-40, -120, -200, -280, -360]

    zig, evasive, acc = roster[1], roster[2], roster[4]
    assert zig.amplitude == pytest.approx(59.27107213065028)
    assert zig.frequency == pytest.approx(1.7723816285142675)
    assert evasive.evade_speed == pytest.approx(162.567527750507)
    assert acc.acceleration == pytest.approx(40.462066512554884)
    assert acc.vy == pytest.approx(48.71425876626745)
    # no drift stream: midpoint drift
    assert roster[0].vy == 45.0


def test_roster_from_scripted_draws(sequence_rng):
    rng = sequence_rng([0.5, 0.1, 0.2, 0.25, 0.3, 0.5, 0.5, 0.75, 0.6, 0.8, 0.4, 0.95, 0.5, 0.5])
    roster = generate_roster(rng, WIDTH)

    assert rng.calls == 14
    assert len(roster) == 4

    straight, zig, evasive, swoop = roster
    assert isinstance(straight, StraightEnemy)
    assert (straight.x, straight.y) == (80, -40)

    assert isinstance(zig, ZigzagEnemy)
    assert (zig.x, zig.y) == (140, -120)
    assert zig.amplitude == pytest.approx(50.0)
    assert zig.frequency == pytest.approx(1.75)

    assert isinstance(evasive, EvasiveEnemy)
    assert (evasive.x, evasive.y) == (340, -200)
    assert evasive.evade_speed == pytest.approx(160.0)

    assert isinstance(swoop, SwoopEnemy)
    assert (swoop.x, swoop.y) == (200, -280)
    assert swoop.swoop_frequency == pytest.approx(2.0)
    assert swoop.vy == pytest.approx(55.0)


def test_accelerator_consumes_two_draws(sequence_rng):
    rng = sequence_rng([0.0, 0.5, 0.8, 0.5, 0.0])
    (enemy,) = generate_roster(rng, WIDTH)
    assert isinstance(enemy, AcceleratorEnemy)
    assert enemy.acceleration == pytest.approx(40.0)
    assert enemy.vy == pytest.approx(20.0)
    assert rng.calls == 5


def test_minimum_roster_has_one_enemy(sequence_rng):
    roster = generate_roster(sequence_rng([0.0, 0.0, 0.0]), WIDTH)
    assert len(roster) == 1
    assert roster[0].x == 40


def test_maximum_roster_has_seven_enemies(sequence_rng):
    draws = [0.999999] + [0.0, 0.0] * 7
    assert len(generate_roster(sequence_rng(draws), WIDTH)) == 7


@pytest.mark.parametrize("u,kind", [
    (0.0, EnemyKind.STRAIGHT),
    (0.2799, EnemyKind.STRAIGHT),
    (0.28, EnemyKind.ZIGZAG),
    (0.52, EnemyKind.EVASIVE),
    (0.72, EnemyKind.ACCELERATOR),
    (0.88, EnemyKind.SWOOP),
    (0.9999, EnemyKind.SWOOP),
])
def test_pick_enemy_kind_table(u, kind):
    assert pick_enemy_kind(u) is kind


def test_same_seed_same_roster():
    seed = seed_from_key("2025-10-05")
    first = generate_roster(Mulberry32(seed), WIDTH, Mulberry32(derive_seed(seed, "drift")))
    second = generate_roster(Mulberry32(seed), WIDTH, Mulberry32(derive_seed(seed, "drift")))
    assert first == second


def test_drift_stream_does_not_change_main_draws():
    seed = seed_from_key("2025-10-02")
    plain = generate_roster(Mulberry32(seed), WIDTH)
    drifted = generate_roster(Mulberry32(seed), WIDTH, Mulberry32(derive_seed(seed, "drift")))
    assert [(e.kind, e.x, e.y) for e in plain] == [(e.kind, e.x, e.y) for e in drifted]


def test_generated_parameters_stay_in_range():
    for seed in range(500):
        roster = generate_roster(Mulberry32(seed), WIDTH, Mulberry32(derive_seed(seed, "drift")))
        assert 1 <= len(roster) <= 7
        for i, e in enumerate(roster):
            assert 40 <= e.x < WIDTH - 40
            assert e.y == -40 - i * 80
            assert e.radius == 12
            assert e.hp == 1
            if isinstance(e, (StraightEnemy, ZigzagEnemy, EvasiveEnemy)):
                assert 30 <= e.vy < 60
            if isinstance(e, ZigzagEnemy):
                assert 30 <= e.amplitude < 70
                assert 1 <= e.frequency < 2.5
            elif isinstance(e, EvasiveEnemy):
                assert 80 <= e.evade_speed < 180
            elif isinstance(e, AcceleratorEnemy):
                assert 20 <= e.acceleration < 60
                assert 20 <= e.vy < 50
            elif isinstance(e, SwoopEnemy):
                assert 1 <= e.swoop_frequency < 3
                assert 40 <= e.vy < 70
