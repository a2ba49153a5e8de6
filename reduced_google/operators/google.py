"""Forward and transpose products with the damped Google matrix.

G = (1 - alpha) * S + alpha / N * e e^T, where S splits every node's mass
evenly over its out-links and spreads the mass of dangling nodes uniformly
over all N nodes. Both products write into a caller-supplied buffer.
"""

import numpy as np

from reduced_google.errors import DimensionError
from reduced_google.graph.types import Network


def _prepare_output(
    network: Network, output: np.ndarray | None, input_: np.ndarray
) -> np.ndarray:
    n = network.size
    if input_.shape != (n,):
        raise DimensionError(
            f"Input vector has shape {input_.shape}, network size is {n}"
        )
    if output is None:
        return np.empty(n, dtype=np.float64)
    if output.shape != (n,):
        raise DimensionError(
            f"Output vector has shape {output.shape}, network size is {n}"
        )
    if output is input_:
        raise ValueError("output and input must be distinct buffers")
    return output


def _apply_damping(
    network: Network,
    delta_alpha: float,
    output: np.ndarray,
    input_: np.ndarray,
    normalize: bool,
) -> None:
    # Skipped entirely at delta_alpha == 0 so no rounding noise is added.
    if delta_alpha == 0:
        return
    output *= 1.0 - delta_alpha
    norm_sum = 1.0 if normalize else float(input_.sum())
    output += norm_sum * delta_alpha / network.size


def multiply_forward(
    network: Network,
    delta_alpha: float,
    output: np.ndarray | None,
    input_: np.ndarray,
    normalize: bool = True,
) -> np.ndarray:
    """Compute output = G . input.

    Args:
        network: Graph to propagate over.
        delta_alpha: Damping (teleport) probability alpha.
        output: Destination buffer of length N, or None to allocate.
        input_: Source vector of length N.
        normalize: If True the teleport term assumes sum(input) == 1,
            otherwise it uses the actual sum.

    Returns:
        The output buffer.

    Raises:
        DimensionError: If a vector length differs from the network size.
    """
    output = _prepare_output(network, output, input_)

    dangling_mass = 0.0
    if network.dangling_count > 0:
        dangling_mass = float(input_[network.dangling].sum()) / network.size

    # out[to] += in[from] / out_degree[from]
    output[:] = network.adjacency_t @ (input_ * network.inv_out_degree)
    output += dangling_mass

    _apply_damping(network, delta_alpha, output, input_, normalize)
    return output


def multiply_transpose(
    network: Network,
    delta_alpha: float,
    output: np.ndarray | None,
    input_: np.ndarray,
    normalize: bool = True,
) -> np.ndarray:
    """Compute output = G^T . input.

    Dangling nodes receive sum(input) / N; every linked node receives the
    sum of its successors' input values divided by its own out-degree.
    Damping as in multiply_forward.
    """
    output = _prepare_output(network, output, input_)

    output[:] = network.adjacency @ input_
    output *= network.inv_out_degree
    if network.dangling_count > 0:
        output[network.dangling] += float(input_.sum()) / network.size

    _apply_damping(network, delta_alpha, output, input_, normalize)
    return output
