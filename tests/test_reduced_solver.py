"""Tests for the restricted-matrix solver against a dense linear-algebra reference."""

import numpy as np
import pytest

from conftest import dense_google
from reduced_google.deadline import Deadline
from reduced_google.eigen import STOP_CONVERGED, STOP_DEADLINE, STOP_MAX_ITER, compute_eigenpair
from reduced_google.errors import DegenerateSubsetError, DimensionError
from reduced_google.graph import build_network
from reduced_google.reduced import ReducedMatrices, compute_column, compute_reduced_matrices


def _dense_reduced(network, alpha, subset):
    """Reference G_rr, G_pr, G_qr, G_I from dense eigenvectors and a linear solve."""
    n = network.size
    G = dense_google(network, alpha)
    m = np.ones(n)
    m[subset] = 0.0
    A = np.diag(m) @ G @ np.diag(m)

    values, vectors = np.linalg.eig(A)
    k = int(np.argmax(values.real))
    right = vectors[:, k].real
    right /= right.sum()
    lam = float(values[k].real)

    values_t, vectors_t = np.linalg.eig(A.T)
    left = vectors_t[:, int(np.argmax(values_t.real))].real
    left /= left @ right
    dlambda = 1.0 - lam

    Q = np.eye(n) - np.outer(right, left)
    nr = len(subset)
    out = {key: np.zeros((nr, nr)) for key in ("Grr", "Gpr", "Gqr", "GI")}
    for i, node in enumerate(subset):
        b = G[:, node]
        b0 = b * m
        p = (left @ b0 / dlambda) * right
        s = np.linalg.solve(np.eye(n) - Q @ A, Q @ b0)
        out["Grr"][:, i] = b[subset]
        out["Gpr"][:, i] = (G @ p)[subset]
        out["Gqr"][:, i] = (G @ s)[subset]
        out["GI"][:, i] = (G @ (p + s))[subset]
    return out


CASES = [
    ("triangle_network", 0.15, [0]),
    ("mixed_network", 0.85, [0, 3]),
    ("mixed_network", 0.85, [6, 1, 4]),
]


class TestDenseAgreement:
    """Iterative results agree with the dense reference."""

    @pytest.mark.parametrize("fixture, alpha, subset", CASES)
    def test_matches_dense(self, request, fixture, alpha, subset) -> None:
        network = request.getfixturevalue(fixture)
        subset = np.array(subset)
        reduced = compute_reduced_matrices(network, subset, alpha, workers=2)
        expected = _dense_reduced(network, alpha, subset)

        np.testing.assert_allclose(reduced.G_rr, expected["Grr"], atol=1e-9)
        np.testing.assert_allclose(reduced.G_pr, expected["Gpr"], atol=1e-9)
        np.testing.assert_allclose(reduced.G_qr, expected["Gqr"], atol=1e-9)
        np.testing.assert_allclose(reduced.G_I, expected["GI"], atol=1e-9)

    @pytest.mark.parametrize("fixture, alpha, subset", CASES)
    def test_total_is_sum(self, request, fixture, alpha, subset) -> None:
        network = request.getfixturevalue(fixture)
        reduced = compute_reduced_matrices(network, np.array(subset), alpha)
        np.testing.assert_allclose(reduced.G_R, reduced.G_rr + reduced.G_I, atol=1e-15)

    def test_g_rr_is_submatrix(self, mixed_network) -> None:
        subset = np.array([2, 5])
        reduced = compute_reduced_matrices(mixed_network, subset, 0.85)
        G = dense_google(mixed_network, 0.85)
        np.testing.assert_allclose(reduced.G_rr, G[np.ix_(subset, subset)], atol=1e-15)

    def test_columns_converge(self, mixed_network) -> None:
        reduced = compute_reduced_matrices(mixed_network, np.array([0, 3]), 0.85)
        assert len(reduced.columns) == 2
        assert [c.index for c in reduced.columns] == [0, 1]
        assert all(c.stop_reason == STOP_CONVERGED for c in reduced.columns)


class TestConcurrency:
    """Column dispatch does not change results."""

    def test_workers_do_not_change_result(self, mixed_network) -> None:
        subset = np.array([6, 1, 4])
        pair = compute_eigenpair(mixed_network, 0.85, subset)
        one = compute_reduced_matrices(mixed_network, subset, 0.85, eigenpair=pair, workers=1)
        four = compute_reduced_matrices(mixed_network, subset, 0.85, eigenpair=pair, workers=4)
        for key, matrix in one.as_dict().items():
            np.testing.assert_array_equal(matrix, four.as_dict()[key])


class TestEdgeCases:
    """Empty subsets, bad input and deadlines."""

    def test_empty_subset(self, mixed_network) -> None:
        reduced = compute_reduced_matrices(
            mixed_network, np.empty(0, dtype=np.int64), 0.15
        )
        assert reduced.size == 0
        assert reduced.G_R.shape == (0, 0)
        assert reduced.columns == []

    def test_subset_out_of_range(self, triangle_network) -> None:
        with pytest.raises(DimensionError):
            compute_reduced_matrices(triangle_network, np.array([3]), 0.15)

    def test_eigenpair_size_mismatch(self, triangle_network, mixed_network) -> None:
        pair = compute_eigenpair(mixed_network, 0.85, np.array([0]))
        with pytest.raises(DimensionError, match="Eigenvector"):
            compute_reduced_matrices(
                triangle_network, np.array([0]), 0.15, eigenpair=pair
            )

    def test_deadline_stops_column(self, mixed_network) -> None:
        subset = np.array([0, 3])
        pair = compute_eigenpair(mixed_network, 0.85, subset)
        deadline = Deadline()
        deadline.cancel()
        column = compute_column(
            mixed_network, pair, subset, 0, 0.85, max_iter=100, deadline=deadline
        )
        assert column.stop_reason == STOP_DEADLINE
        assert column.iterations == 1
        assert not column.converged

    def test_iteration_cap_stops_column(self, mixed_network) -> None:
        subset = np.array([0, 3])
        pair = compute_eigenpair(mixed_network, 0.85, subset)
        column = compute_column(mixed_network, pair, subset, 0, 0.85, max_iter=3)
        assert column.stop_reason == STOP_MAX_ITER
        assert column.iterations == 3
        assert not column.converged
        assert column.quality > 0
        for values in (column.g_rr, column.g_pr, column.g_qr, column.g_i):
            assert values.shape == (2,)
            assert np.all(np.isfinite(values))

    def test_absorbing_subset_raises(self) -> None:
        network = build_network(np.array([0, 1, 2]), np.array([0, 0, 0]), 3)
        with pytest.raises(DegenerateSubsetError):
            compute_reduced_matrices(network, np.array([0]), 0.0)


class TestReducedMatrices:
    """Container helpers."""

    def test_as_dict_keys(self) -> None:
        reduced = ReducedMatrices.zeros(np.array([4, 7]))
        assert list(reduced.as_dict()) == ["GR", "Grr", "Gpr", "Gqr", "GI"]
        assert reduced.size == 2

    def test_check_shapes(self) -> None:
        reduced = ReducedMatrices.zeros(np.array([4, 7]))
        reduced.G_qr = np.zeros((3, 3))
        with pytest.raises(DimensionError, match="G_qr|Gqr"):
            reduced.check_shapes()
