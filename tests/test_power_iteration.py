"""Tests for the deflating power iteration and the biorthogonal eigenpair."""

import numpy as np
import pytest

from conftest import dense_google
from reduced_google.deadline import Deadline
from reduced_google.eigen import (
    STOP_CONVERGED,
    STOP_DEADLINE,
    STOP_DEGENERATE,
    STOP_MAX_ITER,
    STOP_STALLED,
    PowerIterationResult,
    calc_pagerank_project,
    compute_eigenpair,
    compute_pagerank,
    max_iterations,
)
from reduced_google.errors import DegenerateSubsetError
from reduced_google.graph import build_network


def _perron(matrix: np.ndarray) -> tuple[float, np.ndarray]:
    """Largest real eigenvalue and its eigenvector scaled to sum 1."""
    values, vectors = np.linalg.eig(matrix)
    k = int(np.argmax(values.real))
    vec = vectors[:, k].real
    return float(values[k].real), vec / vec.sum()


def _deflated_dense(network, alpha, subset):
    """Dense diag(m) G diag(m) with m zero on the subset."""
    m = np.ones(network.size)
    m[subset] = 0.0
    return np.diag(m) @ dense_google(network, alpha) @ np.diag(m)


class TestMaxIterations:
    """Iteration cap formula."""

    def test_default_alpha(self) -> None:
        assert max_iterations(0.15) == 398

    def test_alpha_one(self) -> None:
        assert max_iterations(1.0) == 58


class TestPageRank:
    """Undeflated power iteration."""

    def test_cycle_uniform(self, cycle_network) -> None:
        result = compute_pagerank(cycle_network, 0.15)
        np.testing.assert_allclose(result.vector, 0.25, atol=1e-10)
        assert result.stop_reason == STOP_CONVERGED
        assert result.dlambda == 0.0

    def test_matches_dense(self, mixed_network) -> None:
        result = compute_pagerank(mixed_network, 0.15)
        _, expected = _perron(dense_google(mixed_network, 0.15))
        np.testing.assert_allclose(result.vector, expected, atol=1e-10)
        assert result.converged
        assert result.vector.sum() == pytest.approx(1.0, abs=1e-12)

    def test_start_not_mutated(self, mixed_network) -> None:
        start = np.ones(mixed_network.size)
        calc_pagerank_project(
            mixed_network, 0.15, start, np.empty(0, dtype=np.int64)
        )
        np.testing.assert_array_equal(start, np.ones(mixed_network.size))


class TestDeflatedIteration:
    """Right and left eigenvectors of the operator deflated at a subset."""

    @pytest.mark.parametrize(
        "fixture, alpha, subset",
        [
            ("triangle_network", 0.15, [0]),
            ("mixed_network", 0.85, [0, 3]),
        ],
    )
    def test_right_matches_dense(self, request, fixture, alpha, subset) -> None:
        network = request.getfixturevalue(fixture)
        subset = np.array(subset)
        result = calc_pagerank_project(
            network, alpha, np.ones(network.size), subset
        )
        lam, expected = _perron(_deflated_dense(network, alpha, subset))
        np.testing.assert_allclose(result.vector, expected, atol=1e-10)
        assert result.dlambda == pytest.approx(1.0 - lam, abs=1e-10)
        assert result.eigenvalue == pytest.approx(lam, abs=1e-10)
        assert np.all(result.vector[subset] == 0.0)

    def test_left_matches_dense(self, triangle_network) -> None:
        subset = np.array([0])
        result = calc_pagerank_project(
            triangle_network, 0.15, np.ones(3), subset, transpose=True
        )
        lam, expected = _perron(_deflated_dense(triangle_network, 0.15, subset).T)
        np.testing.assert_allclose(result.vector, expected, atol=1e-10)
        assert result.dlambda == pytest.approx(1.0 - lam, abs=1e-10)

    def test_cancelled_deadline_stops(self, mixed_network) -> None:
        deadline = Deadline()
        deadline.cancel()
        result = calc_pagerank_project(
            mixed_network, 0.15, np.ones(mixed_network.size), np.array([0]),
            deadline=deadline,
        )
        assert result.stop_reason == STOP_DEADLINE
        assert result.iterations == 1
        assert not result.converged
        assert result.vector.sum() == pytest.approx(1.0)


class TestStopConditions:
    """Stall detection, the iteration cap and exhausted mass."""

    @pytest.fixture
    def split_network(self):
        """0 -> 1, 1 -> 2, 1 -> 3, 2 -> 0, 3 -> 0."""
        return build_network(
            np.array([0, 1, 1, 2, 3]), np.array([1, 2, 3, 0, 0]), 4
        )

    @pytest.fixture
    def sink_network(self):
        """Every node links only to node 0."""
        return build_network(np.array([0, 1, 2]), np.array([0, 0, 0]), 3)

    def test_stall_stops_when_difference_grows(self, split_network) -> None:
        # Differences 2 then 3 between checks: below the threshold, not shrinking.
        result = calc_pagerank_project(
            split_network, 0.0, np.array([1.0, 0.0, 0.0, 0.0]),
            np.empty(0, dtype=np.int64), check_interval=1, stall_threshold=10.0,
        )
        assert result.stop_reason == STOP_STALLED
        assert result.iterations == 2
        assert result.quality_rel == pytest.approx(3.0)
        assert result.converged
        np.testing.assert_allclose(result.vector, [0.0, 0.0, 0.5, 0.5])

    def test_cap_reached_without_convergence(self, mixed_network) -> None:
        assert max_iterations(1.0, 0.5) == 0
        start = np.zeros(mixed_network.size)
        start[0] = 1.0
        result = calc_pagerank_project(
            mixed_network, 1.0, start, np.empty(0, dtype=np.int64), eps=0.5
        )
        assert result.stop_reason == STOP_MAX_ITER
        assert result.iterations == 1
        assert not result.converged
        assert result.quality_rel > 0.5
        assert np.all(np.isfinite(result.vector))
        assert result.vector.sum() == pytest.approx(1.0)

    @pytest.mark.parametrize("transpose", [False, True])
    def test_subset_absorbing_everything(self, sink_network, transpose) -> None:
        result = calc_pagerank_project(
            sink_network, 0.0, np.ones(3), np.array([0]), transpose=transpose
        )
        assert result.stop_reason == STOP_DEGENERATE
        assert result.iterations == 1
        assert not result.converged
        assert not np.any(np.isnan(result.vector))

    def test_start_inside_subset(self, cycle_network) -> None:
        start = np.array([1.0, 0.0, 0.0, 0.0])
        result = calc_pagerank_project(cycle_network, 0.15, start, np.array([0]))
        assert result.stop_reason == STOP_DEGENERATE
        assert result.iterations == 0

    def test_eigenpair_rejects_absorbing_subset(self, sink_network) -> None:
        with pytest.raises(DegenerateSubsetError, match="absorbs all mass"):
            compute_eigenpair(sink_network, 0.0, np.array([0]))


class TestEigenpair:
    """Concurrent left/right/PageRank solves."""

    def test_biorthogonal(self, mixed_network) -> None:
        pair = compute_eigenpair(mixed_network, 0.85, np.array([0, 3]))
        assert pair.biorthogonality == pytest.approx(1.0, abs=1e-10)
        assert float(pair.left @ pair.right) == pytest.approx(1.0, abs=1e-10)
        assert pair.dlambda == pytest.approx(pair.dlambda_left, abs=1e-10)
        assert pair.converged

    def test_pagerank_included(self, mixed_network) -> None:
        pair = compute_eigenpair(mixed_network, 0.15, np.array([1]))
        expected = compute_pagerank(mixed_network, 0.15).vector
        np.testing.assert_allclose(pair.pagerank, expected, atol=1e-14)

    def test_sequential_matches_concurrent(self, triangle_network) -> None:
        subset = np.array([0])
        a = compute_eigenpair(triangle_network, 0.15, subset, workers=1)
        b = compute_eigenpair(triangle_network, 0.15, subset, workers=3)
        np.testing.assert_array_equal(a.right, b.right)
        np.testing.assert_array_equal(a.left, b.left)


class TestResultFlags:
    """Stop reason classification."""

    @pytest.mark.parametrize(
        "reason, converged",
        [
            (STOP_CONVERGED, True),
            (STOP_STALLED, True),
            (STOP_MAX_ITER, False),
            (STOP_DEADLINE, False),
            (STOP_DEGENERATE, False),
        ],
    )
    def test_converged_flag(self, reason, converged) -> None:
        result = PowerIterationResult(
            vector=np.ones(2) / 2, dlambda=0.1, iterations=5,
            quality=0.0, quality_rel=0.0, stop_reason=reason,
        )
        assert result.converged is converged
        assert result.eigenvalue == pytest.approx(0.9)


class TestDeadline:
    """Cooperative deadline."""

    def test_no_limit_never_expires(self) -> None:
        deadline = Deadline()
        assert not deadline.expired()
        assert deadline.remaining() is None

    def test_cancel(self) -> None:
        deadline = Deadline(1000.0)
        deadline.cancel()
        assert deadline.cancelled
        assert deadline.expired()

    def test_invalid_seconds(self) -> None:
        with pytest.raises(ValueError):
            Deadline(0)
