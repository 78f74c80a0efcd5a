"""Tests for diamond-square noise synthesis."""

import numpy as np
import pytest

from islandgen.prng import RandomStream
from islandgen.terrain.noise import diamond_square, working_size


def _sequential_diamond_square(
    width: int, height: int, seed: int, roughness: float, jitter: float = 0.0
) -> np.ndarray:
    """Cell-by-cell midpoint displacement, visiting sub-squares row-major."""
    rng = RandomStream(seed)
    size = working_size(width, height)
    last = size - 1
    field = np.zeros((size, size), dtype=np.float64)

    field[0, 0] = rng.float(0, 1)
    field[0, last] = rng.float(0, 1)
    field[last, 0] = rng.float(0, 1)
    field[last, last] = rng.float(0, 1)

    step = last
    while step > 1:
        half = step // 2
        r = (step / size) * roughness + jitter

        for y in range(0, last, step):
            for x in range(0, last, step):
                s0 = field[y, x]
                s1 = field[y, x + step]
                s2 = field[y + step, x]
                s3 = field[y + step, x + step]
                field[y + half, x + half] = (s0 + s1 + s2 + s3) / 4 + rng.float(-r, r)

        for y in range(0, last, step):
            for x in range(0, last, step):
                x1, y1 = x + step, y + step
                cx, cy = x + half, y + half
                s0 = field[y, x]
                s1 = field[y, x1]
                s2 = field[y1, x]
                s3 = field[y1, x1]
                cs = field[cy, cx]

                if y == 0:
                    top = (s0 + cs + s1) / 3
                else:
                    top = (s0 + cs + s1 + field[y - half, cx]) / 4
                if x == 0:
                    left = (s0 + cs + s2) / 3
                else:
                    left = (s0 + cs + s2 + field[cy, x - half]) / 4
                if x1 == last:
                    right = (s1 + cs + s3) / 3
                else:
                    right = (s1 + cs + s3 + field[cy, x1 + half]) / 4
                if y1 == last:
                    bottom = (cs + s2 + s3) / 3
                else:
                    bottom = (cs + s2 + s3 + field[y1 + half, cx]) / 4

                field[y, cx] = top + rng.float(-r, r)
                field[cy, x] = left + rng.float(-r, r)
                field[cy, x1] = right + rng.float(-r, r)
                field[y1, cx] = bottom + rng.float(-r, r)

        step //= 2

    np.clip(field, 0.0, 1.0, out=field)
    return field[:height, :width].astype(np.float32)


class TestWorkingSize:
    """Tests for the 2^n + 1 working grid size."""

    @pytest.mark.parametrize(
        "width, height, expected",
        [
            (1, 1, 3),
            (2, 2, 3),
            (3, 3, 5),
            (50, 50, 65),
            (64, 10, 65),
            (65, 65, 129),
            (10, 100, 129),
        ],
    )
    def test_smallest_size_above_dimensions(
        self, width: int, height: int, expected: int
    ) -> None:
        """Size is the smallest 2^n + 1 strictly above both dimensions."""
        assert working_size(width, height) == expected


class TestDiamondSquare:
    """Tests for the fractal height synthesizer."""

    def test_output_shape(self) -> None:
        """Output has (height, width) shape."""
        result = diamond_square(100, 50, seed=42)
        assert result.shape == (50, 100)

    def test_output_dtype(self) -> None:
        """Output is float32."""
        result = diamond_square(32, 32, seed=42)
        assert result.dtype == np.float32

    @pytest.mark.parametrize("seed", [1, 42, 1234567, -99])
    @pytest.mark.parametrize("roughness", [0.5, 0.9, 2.0, 10.0])
    def test_values_clamped_to_unit_interval(self, seed: int, roughness: float) -> None:
        """Every value lies in [0, 1] for any seed and roughness."""
        result = diamond_square(40, 30, seed=seed, roughness=roughness)
        assert result.min() >= 0.0
        assert result.max() <= 1.0

    def test_deterministic_with_same_seed(self) -> None:
        """Same seed produces identical output."""
        result1 = diamond_square(64, 64, seed=123, roughness=0.9)
        result2 = diamond_square(64, 64, seed=123, roughness=0.9)
        np.testing.assert_array_equal(result1, result2)

    def test_different_seed_different_output(self) -> None:
        """Different seeds produce different output."""
        result1 = diamond_square(64, 64, seed=123)
        result2 = diamond_square(64, 64, seed=456)
        assert not np.array_equal(result1, result2)

    def test_cropping_preserves_cell_values(self) -> None:
        """Requests sharing a working size see the same values where they overlap."""
        square = diamond_square(40, 40, seed=7, roughness=0.9)
        wide = diamond_square(50, 30, seed=7, roughness=0.9)
        np.testing.assert_array_equal(square[:30, :40], wide[:, :40])

    def test_fixed_corners_used(self) -> None:
        """Supplied corner values seed the field."""
        result = diamond_square(8, 8, seed=1, corners=(0.25, 0.5, 0.5, 0.5))
        assert result[0, 0] == 0.25

    def test_flat_without_displacement(self) -> None:
        """Equal corners and no displacement give a flat field."""
        result = diamond_square(
            20, 20, seed=1, roughness=0.0, jitter=0.0, corners=(0.5, 0.5, 0.5, 0.5)
        )
        np.testing.assert_allclose(result, 0.5)

    def test_edge_midpoints_average_three_samples(self) -> None:
        """On a 3x3 field edge midpoints mix two corners with the centre."""
        result = diamond_square(
            2, 2, seed=1, roughness=0.0, corners=(0.0, 0.4, 0.8, 0.4)
        )
        # Centre (0 + 0.4 + 0.8 + 0.4) / 4, top (0 + 0.4 + 0.4) / 3,
        # left (0 + 0.4 + 0.8) / 3
        expected = np.array([[0.0, 0.8 / 3], [0.4, 0.4]], dtype=np.float32)
        np.testing.assert_allclose(result, expected, atol=1e-6)

    @pytest.mark.parametrize(
        "width, height, seed, roughness",
        [
            (2, 2, 1, 0.9),
            (4, 4, 42, 0.9),
            (8, 8, 7, 2.0),
            (20, 13, 12345, 0.5),
        ],
    )
    def test_matches_sequential_midpoint_displacement(
        self, width: int, height: int, seed: int, roughness: float
    ) -> None:
        """Values equal a cell-by-cell walk with the same draw order.

        Each sub-square draws top, left, right, bottom in turn and a midpoint
        shared with a later sub-square keeps the later value.
        """
        result = diamond_square(width, height, seed=seed, roughness=roughness)
        expected = _sequential_diamond_square(width, height, seed, roughness)
        np.testing.assert_allclose(result, expected, rtol=0, atol=1e-6)

    def test_jitter_matches_sequential(self) -> None:
        """Fixed jitter is added to every step's displacement range."""
        result = diamond_square(6, 6, seed=99, roughness=0.3, jitter=0.05)
        expected = _sequential_diamond_square(6, 6, 99, 0.3, jitter=0.05)
        np.testing.assert_allclose(result, expected, rtol=0, atol=1e-6)

    def test_wrong_corner_count_rejected(self) -> None:
        """Corner values must come in fours."""
        with pytest.raises(ValueError):
            diamond_square(8, 8, seed=1, corners=(0.1, 0.2, 0.3))

    def test_higher_roughness_more_variation(self) -> None:
        """Rougher fields vary more between neighbouring cells."""
        smooth = diamond_square(64, 64, seed=42, roughness=0.1)
        rough = diamond_square(64, 64, seed=42, roughness=0.9)

        grad_smooth = np.abs(np.diff(smooth, axis=0)).mean()
        grad_rough = np.abs(np.diff(rough, axis=0)).mean()

        assert grad_rough > grad_smooth
