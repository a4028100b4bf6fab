"""
Qwell - Energy levels of a particle in a shaped 1D well

Quick start:
    >>> import Qwell
    >>> result = Qwell.solve_quick("square_barrier", n_states=4, amplitude=3.0)
    >>> print(f"Lowest eigenvalue: {result.energy:.6f}")
"""

__version__ = "0.1.0"

# Core imports
from .Core import (
    Grid,
    WellSystem,
    Result,
    InvalidParameterError,
    NumericalNonConvergenceError,
)
from .potentials import (
    MXVAL,
    PotentialType,
    PotentialProfile,
    generate_potential,
    get_potential,
    general_well,
    shape_name,
    list_potentials,
    resolve_shape,
)
from .Solvers import (
    build_hamiltonian,
    build_finite_difference_hamiltonian,
    solve_eigenproblem,
    solve_eigenstates,
    solve_ground_state,
    solve_well,
    solve,
)
from .solvers.jacobi import jacobi_eigh


# Convenience imports for common use cases
def solve_quick(shape: str = "square", **kwargs) -> Result:
    """Quick solve for a named well shape.

    Examples:
        >>> result = Qwell.solve_quick("linear", amplitude=2.0)
        >>> result = Qwell.solve_quick("kronig_penney", n_states=5, steps=100,
        ...                            hamiltonian="finite_difference")
    """
    # Extract solver-specific kwargs
    n_states = kwargs.pop('n_states', 1)
    solver_kwargs = {
        key: kwargs.pop(key)
        for key in ('hamiltonian', 'method', 'tolerance', 'max_iterations', 'verbose')
        if key in kwargs
    }

    # Create system with remaining kwargs (steps, bounds, amplitude, ...)
    system = WellSystem.create(shape, **kwargs)

    return solve_eigenstates(system, n_states=n_states, **solver_kwargs)


# Aliases for convenience
solve_system = solve_quick


# Package metadata
__all__ = [
    # Core classes
    "Grid",
    "WellSystem",
    "Result",
    "InvalidParameterError",
    "NumericalNonConvergenceError",
    # Potentials
    "MXVAL",
    "PotentialType",
    "PotentialProfile",
    "generate_potential",
    "get_potential",
    "general_well",
    "shape_name",
    "list_potentials",
    "resolve_shape",
    # Solver functions
    "build_hamiltonian",
    "build_finite_difference_hamiltonian",
    "solve_eigenproblem",
    "solve_eigenstates",
    "solve_ground_state",
    "solve_well",
    "solve",
    "jacobi_eigh",
    # Convenience
    "solve_quick",
    "solve_system",
]


def info():
    """Print package information."""
    print(f"Qwell v{__version__}")
    print("Energy levels of a particle in a shaped 1D well")
    print(f"\nAvailable shapes: {', '.join(list_potentials())}")
    print("\nExample usage:")
    print("  import Qwell")
    print("  result = Qwell.solve_quick('square_barrier', amplitude=3.0)")
    print("  print(result.energies)")
