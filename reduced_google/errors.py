"""Exception hierarchy shared by the loaders, operators and solvers."""


class ReducedGoogleError(Exception):
    """Base class for all errors raised by this package."""


class DimensionError(ReducedGoogleError, ValueError):
    """Raised when vector, matrix or subset sizes disagree with the network."""


class StructuralError(ReducedGoogleError):
    """Raised when a graph or node file is malformed."""


class DegenerateSubsetError(ReducedGoogleError):
    """Raised when the subset absorbs all mass, so no eigenpair exists outside it."""
