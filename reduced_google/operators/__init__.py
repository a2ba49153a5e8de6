"""Stochastic operators over the damped Google matrix and vector helpers."""

from reduced_google.operators.google import multiply_forward, multiply_transpose
from reduced_google.operators.vectors import (
    diff_norm1,
    diff_norm_rel,
    norm1,
    pagerank_normalize,
    project_p,
    project_q,
    scalar_product,
    sum_vector,
)

__all__ = [
    "diff_norm1",
    "diff_norm_rel",
    "multiply_forward",
    "multiply_transpose",
    "norm1",
    "pagerank_normalize",
    "project_p",
    "project_q",
    "scalar_product",
    "sum_vector",
]
