from __future__ import annotations

from mc_ore_finder.noise import DEFAULT_SCALE, NoiseField, PerlinNoise, sample


def test_noise_is_deterministic_per_seed() -> None:
    a = NoiseField(1234)
    b = NoiseField(1234)
    points = [(x * 37, y * 11, z * 53) for x, y, z in zip(range(20), range(-10, 10), range(5, 25))]
    assert [a.sample(*p) for p in points] == [b.sample(*p) for p in points]
    assert [sample(1234, *p) for p in points] == [a.sample(*p) for p in points]


def test_different_seeds_give_different_fields() -> None:
    points = [(x * 37, 25, x * 21) for x in range(30)]
    assert [NoiseField(1).sample(*p) for p in points] != [NoiseField(2).sample(*p) for p in points]


def test_noise_stays_in_range() -> None:
    field = NoiseField(8674308105921866736)
    for i in range(500):
        value = field.sample(i * 17, i * 7 - 2000, i * 29)
        assert -1.0 <= value <= 1.0
        assert -1.0 <= field.octave(i * 0.01, i * 0.02, i * 0.03, octaves=4, persistence=0.6) <= 1.0


def test_noise_vanishes_on_lattice_points() -> None:
    perlin = PerlinNoise(5)
    assert perlin.noise3d(3.0, -7.0, 12.0) == 0.0


def test_sample_varies_over_block_coordinates() -> None:
    values = {
        sample(8674308105921866736, x, y, z)
        for x in range(0, 700, 50)
        for y in range(-64, 76, 20)
        for z in range(0, 250, 50)
    }
    assert len(values) > 1
    assert any(abs(value) > 0.0 for value in values)


def test_sample_applies_field_scale() -> None:
    field = NoiseField(42)
    sx, sy, sz = DEFAULT_SCALE
    perlin = PerlinNoise(42)
    assert field.sample(123, -40, 77) == max(-1.0, min(1.0, perlin.noise3d(123 * sx, -40 * sy, 77 * sz)))

    coarse = NoiseField(42, scale=(0.05, 0.05, 0.05))
    assert coarse.sample(123, -40, 77) == max(-1.0, min(1.0, perlin.noise3d(123 * 0.05, -40 * 0.05, 77 * 0.05)))


def test_adjacent_blocks_change_smoothly() -> None:
    field = NoiseField(77)
    for x in range(-400, 400, 7):
        here = field.sample(x, 30, x // 2)
        assert abs(field.sample(x + 1, 30, x // 2) - here) < 0.1
        assert abs(field.sample(x, 31, x // 2) - here) < 0.1


def test_adjacent_octave_samples_change_smoothly() -> None:
    field = NoiseField(77)
    scale = 0.01
    for x in range(-100, 100, 7):
        here = field.octave(x * scale, 0.3, x * scale * 0.5, octaves=3, persistence=0.5)
        there = field.octave((x + 1) * scale, 0.3, x * scale * 0.5, octaves=3, persistence=0.5)
        assert abs(here - there) < 0.1
