"""Dense vector helpers: normalization, norms and the P/Q projectors.

All functions operate on float64 numpy arrays indexed by node id. The
projectors work in place on their last argument.
"""

import numpy as np

from reduced_google.errors import DimensionError


def _check_same_length(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise DimensionError(
            f"Vector dimensions differ: {a.shape} vs {b.shape}"
        )


def sum_vector(a: np.ndarray) -> float:
    return float(a.sum())


def norm1(a: np.ndarray) -> float:
    return float(np.abs(a).sum())


def pagerank_normalize(a: np.ndarray) -> float:
    """Divide a in place by its sum so it sums to 1.

    Returns:
        The sum before normalization.
    """
    total = sum_vector(a)
    a /= total
    return total


def scalar_product(a: np.ndarray, b: np.ndarray) -> float:
    _check_same_length(a, b)
    return float(np.dot(a, b))


def diff_norm1(a: np.ndarray, b: np.ndarray) -> float:
    """L1 norm of a - b."""
    _check_same_length(a, b)
    return float(np.abs(a - b).sum())


def diff_norm_rel(a: np.ndarray, b: np.ndarray) -> float:
    """Sum of entrywise relative differences |a_i - b_i| / (|a_i| + |b_i|).

    Entries where both values are zero contribute nothing.
    """
    _check_same_length(a, b)
    denom = np.abs(a) + np.abs(b)
    nonzero = denom != 0
    return float((np.abs(a[nonzero] - b[nonzero]) / denom[nonzero]).sum())


def project_p(
    right: np.ndarray, left: np.ndarray, v: np.ndarray, scale: float = 1.0
) -> np.ndarray:
    """Replace v by its component along the dominant right eigenvector.

    v := (left . v / scale) * right

    Raises:
        DimensionError: On length mismatch.
        ValueError: If scale is zero.
    """
    _check_same_length(right, v)
    if scale == 0:
        raise ValueError(
            "Projector P is undefined: the dominant mode absorbs no mass"
        )
    sp = scalar_product(left, v) / scale
    np.multiply(right, sp, out=v)
    return v


def project_q(right: np.ndarray, left: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Remove the dominant component from v: v -= (left . v) * right."""
    _check_same_length(right, v)
    sp = scalar_product(left, v)
    v -= sp * right
    return v
