"""
Test suite for the histogram filter operations.

Tests initialize_beliefs, blur, move, and sense against worked examples
and the invariants they must preserve (unit mass, purity, exact shifts).

Run: pytest test_histogram.py -v
"""

import pytest
import numpy as np
from numpy.random import default_rng

from histogram_filter.filters.histogram import (
    initialize_beliefs,
    blur,
    move,
    sense,
)
from histogram_filter.models.base import GridWorld
from histogram_filter.models.motion import blur_kernel
from histogram_filter.utils.grid import GridShapeError, close_enough
from histogram_filter.utils.normalization import DegenerateBeliefError, normalize


# ============================================================================
# Assertion helpers
# ============================================================================

def assert_grid_close(name: str, a, b, atol: float = 1e-4):
    """Check two grids match cell by cell."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        pytest.fail(f"{name}: shape {a.shape} != {b.shape}")

    max_abs = np.max(np.abs(a - b))
    if max_abs > atol:
        pytest.fail(
            f"{name}: FAILED\n"
            f"  max_abs_diff={max_abs:.3e}, required atol={atol:.0e}\n"
            f"  got:\n{a}\n  expected:\n{b}"
        )


def assert_distribution(name: str, g, atol: float = 1e-4):
    """Check that a grid is a valid probability distribution."""
    g = np.asarray(g)
    if np.any(g < 0):
        pytest.fail(f"{name}: negative entry {g.min():.3e}")
    if not close_enough(g.sum(), 1.0, atol):
        pytest.fail(f"{name}: sums to {g.sum():.6f}, expected 1")


def localized(height: int, width: int, row: int, col: int) -> np.ndarray:
    """Belief grid with all mass on one cell."""
    g = np.zeros((height, width))
    g[row, col] = 1.0
    return g


def random_beliefs(height: int, width: int, seed: int = 0) -> np.ndarray:
    rng = default_rng(seed)
    return normalize(rng.uniform(0.0, 1.0, size=(height, width)))


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def small_world():
    """3x3 world: green everywhere except a red center."""
    return GridWorld.from_rows([
        ['g', 'g', 'g'],
        ['g', 'r', 'g'],
        ['g', 'g', 'g'],
    ])


@pytest.fixture
def rect_world():
    """4x6 world with several colors."""
    return GridWorld.from_rows([
        "rggbyr",
        "gbrgyg",
        "yrgbgr",
        "bgyrgg",
    ])


# ============================================================================
# Blur kernel
# ============================================================================

class TestBlurKernel:

    @pytest.mark.parametrize("b", [0.0, 0.12, 0.5, 1.0])
    def test_kernel_sums_to_one(self, b):
        assert np.isclose(blur_kernel(b).sum(), 1.0)

    def test_kernel_weights(self):
        k = blur_kernel(0.12)
        assert np.isclose(k[1, 1], 0.88)
        for dy, dx in [(0, 1), (1, 0), (1, 2), (2, 1)]:
            assert np.isclose(k[dy, dx], 0.02)
        for dy, dx in [(0, 0), (0, 2), (2, 0), (2, 2)]:
            assert np.isclose(k[dy, dx], 0.01)

    @pytest.mark.parametrize("b", [-0.1, 1.5, np.nan])
    def test_kernel_rejects_out_of_range(self, b):
        with pytest.raises(ValueError):
            blur_kernel(b)


# ============================================================================
# initialize_beliefs
# ============================================================================

class TestInitializeBeliefs:

    def test_two_by_two(self):
        beliefs = initialize_beliefs([['g', 'g'], ['g', 'g']])
        assert_grid_close("init 2x2", beliefs, [[0.25, 0.25], [0.25, 0.25]])

    def test_rectangular(self, rect_world):
        beliefs = initialize_beliefs(rect_world)
        assert beliefs.shape == (4, 6)
        assert_grid_close("init 4x6", beliefs, np.full((4, 6), 1 / 24))
        assert_distribution("init 4x6", beliefs)

    def test_single_cell(self):
        assert_grid_close("init 1x1", initialize_beliefs([['r']]), [[1.0]])

    def test_rejects_ragged_map(self):
        with pytest.raises(GridShapeError):
            initialize_beliefs([['r', 'g'], ['g']])

    def test_rejects_empty_map(self):
        with pytest.raises(GridShapeError):
            initialize_beliefs([])


# ============================================================================
# blur
# ============================================================================

class TestBlur:

    def test_localized_example(self):
        out = blur(localized(3, 3, 1, 1), 0.12)
        expected = [
            [0.01, 0.02, 0.01],
            [0.02, 0.88, 0.02],
            [0.01, 0.02, 0.01],
        ]
        assert_grid_close("blur 0.12", out, expected, atol=1e-3)

    def test_wraps_around_corner(self):
        out = blur(localized(4, 5, 0, 0), 0.12)
        assert np.isclose(out[0, 0], 0.88)
        assert np.isclose(out[3, 0], 0.02)
        assert np.isclose(out[0, 4], 0.02)
        assert np.isclose(out[3, 4], 0.01)
        assert np.isclose(out[1, 1], 0.01)
        assert out[2, 2] == 0.0

    @pytest.mark.parametrize("b", [0.0, 0.1, 0.5, 1.0])
    def test_mass_conserved(self, b):
        assert_distribution(f"blur b={b}", blur(random_beliefs(5, 7, seed=1), b))

    @pytest.mark.parametrize("b", [0.0, 0.3, 1.0])
    def test_uniform_is_fixed_point(self, b):
        u = np.full((4, 6), 1 / 24)
        assert_grid_close(f"blur uniform b={b}", blur(u, b), u)

    def test_zero_blurring_is_normalize(self):
        g = np.arange(1, 13, dtype=np.float64).reshape(3, 4)
        assert_grid_close("blur b=0", blur(g, 0.0), normalize(g))

    def test_scale_invariant(self):
        g = random_beliefs(3, 5, seed=2)
        assert_grid_close("blur scale", blur(g * 40.0, 0.2), blur(g, 0.2))

    def test_full_blurring_empties_center(self):
        out = blur(localized(3, 3, 1, 1), 1.0)
        assert out[1, 1] == 0.0
        assert np.isclose(out[0, 1], 1 / 6)
        assert np.isclose(out[0, 0], 1 / 12)

    def test_single_row_torus(self):
        # All three kernel rows collapse onto the one row
        out = blur(localized(1, 3, 0, 1), 0.12)
        assert_grid_close("blur 1x3", out, [[0.04, 0.92, 0.04]])

    def test_single_cell_torus(self):
        assert_grid_close("blur 1x1", blur([[5.0]], 0.7), [[1.0]])

    def test_input_untouched(self):
        g = localized(3, 3, 0, 2)
        before = g.copy()
        blur(g, 0.5)
        np.testing.assert_array_equal(g, before)

    def test_zero_grid_raises(self):
        with pytest.raises(DegenerateBeliefError):
            blur(np.zeros((3, 3)), 0.1)

    def test_matches_direct_accumulation(self):
        g = random_beliefs(4, 5, seed=3)
        b = 0.3
        k = blur_kernel(b)
        H, W = g.shape

        expected = np.zeros_like(g)
        for i in range(H):
            for j in range(W):
                for dy in (-1, 0, 1):
                    for dx in (-1, 0, 1):
                        expected[(i + dy) % H, (j + dx) % W] += k[dy + 1, dx + 1] * g[i, j]

        assert_grid_close("blur direct", blur(g, b), expected / expected.sum(), atol=1e-12)


# ============================================================================
# move
# ============================================================================

class TestMove:

    def test_diagonal_example(self):
        out = move(1, 1, localized(3, 3, 1, 1), 0.0)
        assert_grid_close("move (1,1)", out, localized(3, 3, 2, 2))

    def test_dy_moves_rows_dx_moves_columns(self):
        out = move(1, 0, localized(4, 5, 0, 0), 0.0)
        assert out[1, 0] == 1.0
        out = move(0, 1, localized(4, 5, 0, 0), 0.0)
        assert out[0, 1] == 1.0

    def test_wraps_on_non_square_grid(self):
        out = move(2, 3, localized(3, 5, 2, 4), 0.0)
        assert out[1, 2] == 1.0

    def test_negative_and_large_offsets(self):
        g = random_beliefs(3, 4, seed=4)
        assert_grid_close("move large", move(-7, 9, g, 0.0), move(2, 1, g, 0.0), atol=1e-12)

    @pytest.mark.parametrize("dy,dx", [(0, 0), (1, 2), (-3, 5), (7, -11)])
    def test_round_trip(self, dy, dx):
        g = random_beliefs(4, 6, seed=5)
        back = move(-dy, -dx, move(dy, dx, g, 0.0), 0.0)
        assert_grid_close(f"move round trip ({dy},{dx})", back, g, atol=1e-12)

    def test_move_then_blur(self):
        out = move(1, 1, localized(5, 5, 1, 1), 0.12)
        assert np.isclose(out[2, 2], 0.88)
        assert np.isclose(out[1, 2], 0.02)
        assert np.isclose(out[1, 1], 0.01)
        assert_distribution("move blurred", out)

    def test_input_untouched(self):
        g = random_beliefs(3, 3, seed=6)
        before = g.copy()
        move(1, -1, g, 0.2)
        np.testing.assert_array_equal(g, before)

    @pytest.mark.parametrize("dy,dx", [(0.9, 0), (0, 1.5), (1.0, 0), ("1", 0)])
    def test_rejects_non_integer_offsets(self, dy, dx):
        with pytest.raises(ValueError, match="must be an integer"):
            move(dy, dx, localized(3, 3, 1, 1), 0.0)

    def test_accepts_numpy_integer_offsets(self):
        out = move(np.int64(1), np.int32(-1), localized(3, 3, 1, 1), 0.0)
        assert out[2, 0] == 1.0

    def test_rejects_3d_beliefs(self):
        with pytest.raises(GridShapeError):
            move(1, 1, [[[0.5, 0.5], [0.5, 0.5]]], 0.0)

    def test_accepts_nested_lists(self):
        out = move(0, 1, [[1.0, 0.0, 0.0]], 0.0)
        assert_grid_close("move lists", out, [[0.0, 1.0, 0.0]])


# ============================================================================
# sense
# ============================================================================

class TestSense:

    def test_two_cell_example(self):
        out = sense('r', [['r', 'g']], [[0.5, 0.5]], 3.0, 1.0)
        assert_grid_close("sense r", out, [[0.75, 0.25]])

    def test_uniform_prior_on_small_world(self, small_world):
        beliefs = initialize_beliefs(small_world)
        out = sense('r', small_world, beliefs, 3.0, 1.0)
        # 8 misses at weight 1, one hit at weight 3
        assert np.isclose(out[1, 1], 3 / 11)
        assert np.isclose(out[0, 0], 1 / 11)
        assert_distribution("sense small", out)

    def test_unknown_color_is_all_miss(self, rect_world):
        beliefs = random_beliefs(4, 6, seed=7)
        out = sense('x', rect_world, beliefs, 3.0, 1.0)
        assert_grid_close("sense unknown", out, beliefs, atol=1e-12)

    def test_only_ratio_matters(self, rect_world):
        beliefs = random_beliefs(4, 6, seed=8)
        a = sense('g', rect_world, beliefs, 0.6, 0.2)
        b = sense('g', rect_world, beliefs, 3.0, 1.0)
        assert_grid_close("sense ratio", a, b, atol=1e-12)

    def test_repeated_sensing_sharpens(self, small_world):
        beliefs = initialize_beliefs(small_world)
        for _ in range(5):
            beliefs = sense('r', small_world, beliefs, 3.0, 1.0)
        assert beliefs[1, 1] > 0.95

    def test_accepts_color_array(self):
        colors = np.array([['r', 'g'], ['g', 'r']])
        out = sense('g', colors, np.full((2, 2), 0.25), 4.0, 1.0)
        assert_grid_close("sense array", out, [[0.1, 0.4], [0.4, 0.1]])

    def test_shape_mismatch_raises(self, small_world):
        with pytest.raises(GridShapeError):
            sense('r', small_world, np.full((3, 4), 1 / 12), 3.0, 1.0)

    def test_ragged_beliefs_raise(self):
        with pytest.raises(GridShapeError):
            sense('r', [['r', 'g']], [[0.5, 0.5], [0.1]], 3.0, 1.0)

    @pytest.mark.parametrize("p_hit,p_miss", [(0.0, 1.0), (3.0, 0.0), (-1.0, 1.0), (np.inf, 1.0)])
    def test_rejects_invalid_likelihoods(self, p_hit, p_miss):
        with pytest.raises(ValueError):
            sense('r', [['r', 'g']], [[0.5, 0.5]], p_hit, p_miss)

    def test_zero_prior_raises(self):
        with pytest.raises(DegenerateBeliefError):
            sense('r', [['r', 'g']], [[0.0, 0.0]], 3.0, 1.0)

    def test_input_untouched(self, rect_world):
        beliefs = random_beliefs(4, 6, seed=9)
        before = beliefs.copy()
        sense('b', rect_world, beliefs, 3.0, 1.0)
        np.testing.assert_array_equal(beliefs, before)
