"""
qwell/solvers.py - Hamiltonian construction and eigenvalue solvers
"""

import numpy as np
from scipy.sparse import diags
from scipy.sparse.linalg import eigsh, ArpackNoConvergence, ArpackError
import time
from typing import Optional, Literal, Union, Sequence
import logging

from .Core import (
    WellSystem,
    Grid,
    Result,
    InvalidParameterError,
    NumericalNonConvergenceError,
)
from .potentials import PotentialProfile, PotentialType
from .solvers.jacobi import check_symmetric, fix_signs, solve_jacobi

logger = logging.getLogger(__name__)

# Above this size "auto" leaves the Jacobi solver for LAPACK
JACOBI_MAX_SIZE = 64


def _potential_values(potential: Union[PotentialProfile, Sequence[float]]) -> np.ndarray:
    if isinstance(potential, PotentialProfile):
        potential = potential.potentials
    V = np.asarray(potential, dtype=float)
    if V.ndim != 1 or V.size == 0:
        raise InvalidParameterError("Potential must be a non-empty 1D sequence of values")
    return V


def build_hamiltonian(
    potential: Union[PotentialProfile, Sequence[float]],
    width: float,
    states: int,
) -> np.ndarray:
    """Build the ``states x states`` coupling Hamiltonian of a profile.

    H[r, c] = width * V[r] * V[c] - (r == c) * sum(V)

    This is the compatibility coupling scheme, not a discretized
    Schrödinger operator, and its eigenvalues carry no physical units.
    Use :func:`build_finite_difference_hamiltonian` for physical energies.

    Args:
        potential: PotentialProfile or sequence of potential values
        width: Width of the well (``x_max - x_min``)
        states: Number of states, ``1 <= states <= len(potential)``

    Returns:
        Dense symmetric matrix
    """
    V = _potential_values(potential)
    if isinstance(states, bool) or not isinstance(states, (int, np.integer)):
        raise InvalidParameterError(f"states must be an integer, got {type(states).__name__}")
    if states < 1 or states > V.size:
        raise InvalidParameterError(
            f"states must be between 1 and {V.size} for this profile, got {states}"
        )
    if not np.isfinite(width):
        raise InvalidParameterError(f"width must be finite, got {width}")

    basis = V[:states]
    H = width * np.outer(basis, basis)
    H[np.diag_indices(states)] -= V.sum()
    return H


def build_finite_difference_hamiltonian(
    profile: PotentialProfile,
    mass: float = 1.0,
    hbar: float = 1.0,
    sparse: bool = True,
):
    """Build -hbar²/2m d²/dx² + V on the interior samples of a profile.

    The wall samples are dropped; the wavefunction vanishes there, which is
    the infinite-wall boundary condition.

    Args:
        profile: PotentialProfile on a uniform grid
        mass: Particle mass
        hbar: Reduced Planck constant
        sparse: If True, return sparse matrix (recommended for large grids)

    Returns:
        Hamiltonian matrix (sparse or dense) of size ``len(profile) - 2``
    """
    x = np.asarray(profile.positions, dtype=float)
    V = np.asarray(profile.potentials, dtype=float)[1:-1]
    n = V.size
    if n < 1:
        raise InvalidParameterError("Profile has no interior samples")

    dx = x[1] - x[0]
    kinetic_factor = -hbar**2 / (2 * mass)

    if sparse:
        T = kinetic_factor / dx**2 * diags(
            [1, -2, 1], [-1, 0, 1], shape=(n, n), format="csr", dtype=float
        )
        return T + diags(V, 0, format="csr", dtype=float)
    else:
        T = kinetic_factor / dx**2 * (
            np.diag(np.ones(n - 1), 1)
            + np.diag(-2 * np.ones(n), 0)
            + np.diag(np.ones(n - 1), -1)
        )
        return T + np.diag(V)


def solve_eigenproblem(
    matrix,
    method: Literal["jacobi", "dense"] = "jacobi",
    tolerance: Optional[float] = None,
    max_iterations: int = 50,
    verbose: bool = False,
):
    """Diagonalize a real symmetric matrix.

    Args:
        matrix: Square symmetric matrix (dense or sparse)
        method: 'jacobi' (rotation sweeps) or 'dense' (LAPACK via numpy)
        tolerance: Relative off-diagonal threshold for the Jacobi solver
        max_iterations: Sweep budget for the Jacobi solver
        verbose: Log progress information

    Returns:
        ``(eigenvalues, eigenvectors)`` with ascending eigenvalues and
        orthonormal eigenvectors as columns

    Raises:
        InvalidParameterError: If the matrix is not square, finite and symmetric
        NumericalNonConvergenceError: If the sweep budget is exhausted
    """
    eigenvalues, eigenvectors, _ = _diagonalize(
        matrix, method, tolerance, max_iterations, verbose
    )
    return eigenvalues, eigenvectors


def _diagonalize(matrix, method, tolerance, max_iterations, verbose):
    if method == "jacobi":
        return solve_jacobi(
            matrix, tolerance=tolerance, max_iterations=max_iterations, verbose=verbose
        )
    elif method == "dense":
        if verbose:
            logger.info("Using dense solver (full diagonalization)...")
        A = check_symmetric(matrix)
        start_time = time.time()
        eigenvalues, eigenvectors = np.linalg.eigh(A)
        info = {
            "method": "dense",
            "converged": True,
            "iterations": 1,
            "solve_time": time.time() - start_time,
        }
        return eigenvalues, fix_signs(eigenvectors), info
    raise InvalidParameterError(f"Unknown method '{method}'. Must be 'jacobi' or 'dense'")


def _solve_sparse(H, n_states, tolerance, max_iterations, verbose):
    if n_states >= H.shape[0]:
        raise InvalidParameterError(
            f"Sparse solver needs n_states < {H.shape[0]}, got {n_states}"
        )
    if verbose:
        logger.info("Using sparse iterative solver...")

    start_time = time.time()
    try:
        energies, vectors = eigsh(
            H,
            k=n_states,
            which="SA",  # Smallest algebraic eigenvalues
            tol=tolerance or 0,
            maxiter=max_iterations,
            return_eigenvectors=True,
        )
    except ArpackNoConvergence as e:
        raise NumericalNonConvergenceError(
            f"ARPACK did not converge in {max_iterations} iterations: {e}",
            iterations=max_iterations,
        ) from e
    except ArpackError as e:
        raise NumericalNonConvergenceError(f"ARPACK failed: {e}") from e

    order = np.argsort(energies)
    info = {
        "method": "sparse",
        "converged": True,
        "tolerance": tolerance,
        "max_iterations": max_iterations,
        "solve_time": time.time() - start_time,
    }
    return energies[order], fix_signs(vectors[:, order]), info


def solve_eigenstates(
    system: WellSystem,
    n_states: int = 1,
    hamiltonian: Literal["coupling", "finite_difference"] = "coupling",
    method: Literal["auto", "jacobi", "dense", "sparse"] = "auto",
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    verbose: bool = False,
) -> Result:
    """Solve for the eigenstates of a well.

    Args:
        system: Well to solve
        n_states: Number of eigenstates to compute. For the coupling
            Hamiltonian this is also the matrix size
        hamiltonian: 'coupling' (compatibility matrix) or 'finite_difference'
        method: 'auto', 'jacobi', 'dense' or 'sparse' (finite difference only)
        tolerance: Convergence tolerance of the iterative methods
        max_iterations: Sweep budget (Jacobi) or iteration budget (ARPACK)
        verbose: Log progress information

    Returns:
        Result object with all computed eigenstates
    """
    if isinstance(n_states, bool) or not isinstance(n_states, (int, np.integer)) or n_states < 1:
        raise InvalidParameterError(f"n_states must be a positive integer, got {n_states}")

    if hamiltonian not in ["coupling", "finite_difference"]:
        raise InvalidParameterError(
            f"Unknown hamiltonian '{hamiltonian}'. Must be 'coupling' or 'finite_difference'"
        )

    if method not in ["auto", "jacobi", "dense", "sparse"]:
        raise InvalidParameterError(
            f"Unknown method '{method}'. Must be 'auto', 'jacobi', 'dense', or 'sparse'"
        )

    if tolerance is not None and tolerance <= 0:
        raise InvalidParameterError(f"Tolerance must be positive, got {tolerance}")

    if max_iterations is not None and max_iterations < 1:
        raise InvalidParameterError(f"max_iterations must be at least 1, got {max_iterations}")

    profile = system.profile()

    if verbose:
        logger.info(
            "Solving %s (%s steps, %s Hamiltonian)...",
            system.label, system.grid.steps, hamiltonian,
        )

    start_time = time.time()

    # Build Hamiltonian
    if hamiltonian == "coupling":
        H = build_hamiltonian(profile, system.grid.size, n_states)
    else:
        if n_states > system.grid.steps:
            raise InvalidParameterError(
                f"Cannot compute {n_states} states with only {system.grid.steps} interior points"
            )
        H = build_finite_difference_hamiltonian(
            profile, mass=system.mass, hbar=system.hbar, sparse=(method == "sparse")
        )
    size = H.shape[0]

    # Choose method automatically based on matrix size
    if method == "auto":
        method = "jacobi" if size <= JACOBI_MAX_SIZE else "dense"
    if method == "sparse" and hamiltonian == "coupling":
        raise InvalidParameterError("The sparse method needs the finite_difference Hamiltonian")

    if method == "sparse":
        energies, vectors, info = _solve_sparse(
            H, n_states, tolerance, max_iterations or 10 * size, verbose
        )
    else:
        energies, vectors, info = _diagonalize(
            H, method, tolerance, max_iterations or 50, verbose
        )
        energies = energies[:n_states]
        vectors = vectors[:, :n_states]

    solve_time = time.time() - start_time

    info.update(
        {
            "hamiltonian": hamiltonian,
            "solve_time": solve_time,
            "matrix_size": size,
            "n_states": n_states,
        }
    )

    if verbose:
        logger.info("Solved in %.3f seconds", solve_time)
        logger.info("Ground state energy: E0 = %.8g", energies[0])

    return Result(
        energies=energies,
        eigenvectors=vectors,
        system=system,
        hamiltonian=H,
        profile=profile,
        info=info,
    )


def solve_ground_state(system: WellSystem, **kwargs) -> Result:
    """Solve for the lowest eigenstate of a well."""
    kwargs.pop("n_states", None)
    return solve_eigenstates(system, n_states=1, **kwargs)


def solve_well(
    width: float,
    steps: int,
    shape: Union[PotentialType, str],
    amplitude: float,
    n_states: int,
    **kwargs,
) -> Result:
    """Solve a well spanning ``[0, width]``.

    Args:
        width: Width of the well
        steps: Number of interior samples
        shape: Well/barrier shape
        amplitude: Shape amplitude
        n_states: Number of eigenstates
        **kwargs: Passed on to :func:`solve_eigenstates`

    Examples:
        >>> result = solve_well(10.0, 50, "square", 0.0, n_states=3)
    """
    system_kwargs = {k: kwargs.pop(k) for k in ("mass", "hbar") if k in kwargs}
    system = WellSystem(
        grid=Grid(steps=steps, bounds=(0.0, width)),
        shape=shape,
        amplitude=amplitude,
        **system_kwargs,
    )
    return solve_eigenstates(system, n_states=n_states, **kwargs)


# Convenience function
def solve(system: WellSystem, **kwargs) -> Result:
    """Convenience function that defaults to ground state."""
    return solve_ground_state(system, **kwargs)
