"""
qwell/core.py - Core data structures and system definitions
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple, Union
import math
import numpy as np
from numpy.typing import NDArray


class InvalidParameterError(ValueError):
    """Raised when a grid, shape, matrix or solver parameter is out of range."""


class NumericalNonConvergenceError(RuntimeError):
    """Raised when an eigensolver exhausts its iteration budget.

    Attributes:
        iterations: Number of iterations (sweeps) performed
        residual: Off-diagonal norm or residual reached when the solver gave up
    """

    def __init__(self, message: str, iterations: int = 0, residual: float = float("nan")):
        super().__init__(message)
        self.iterations = iterations
        self.residual = residual


@dataclass
class Grid:
    """Spatial grid with infinite walls at both bounds.

    ``steps`` interior samples sit between the two wall samples, so the grid
    holds ``steps + 2`` points in total.

    Examples:
        >>> grid = Grid(steps=9, bounds=(0, 10))
        >>> grid.dx
        1.0
    """
    steps: int = 100
    bounds: Tuple[float, float] = (0.0, 10.0)

    def __post_init__(self):
        if isinstance(self.steps, bool) or not isinstance(self.steps, (int, np.integer)):
            raise InvalidParameterError(
                f"Grid steps must be an integer, got {type(self.steps).__name__}"
            )
        if self.steps < 1:
            raise InvalidParameterError(f"Grid must have at least 1 step, got {self.steps}")

        if len(self.bounds) != 2:
            raise InvalidParameterError(
                f"Bounds must be a tuple of (xmin, xmax), got {self.bounds}"
            )
        x_min, x_max = float(self.bounds[0]), float(self.bounds[1])
        if not (math.isfinite(x_min) and math.isfinite(x_max)):
            raise InvalidParameterError(f"Bounds must be finite, got {self.bounds}")
        if x_max <= x_min:
            raise InvalidParameterError(
                f"Invalid bounds: xmin={x_min} must be less than xmax={x_max}"
            )

        self.steps = int(self.steps)
        self.bounds = (x_min, x_max)
        self.x = np.linspace(x_min, x_max, self.steps + 2)
        self.dx = (x_max - x_min) / (self.steps + 1)

    @property
    def points(self) -> int:
        """Total number of samples, walls included"""
        return self.steps + 2

    @property
    def interior(self) -> NDArray:
        """Samples strictly between the walls"""
        return self.x[1:-1]

    @property
    def size(self) -> float:
        """Width of the well"""
        return self.bounds[1] - self.bounds[0]

    def __repr__(self) -> str:
        return f"Grid(steps={self.steps}, bounds={self.bounds}, dx={self.dx:.3f})"


@dataclass
class WellSystem:
    """A particle in a shaped 1D well.

    Args:
        grid: Spatial grid for calculations
        shape: Well/barrier shape (``PotentialType``, registry key or label)
        amplitude: Shape-specific height, slope or curvature
        mass: Particle mass used by the finite-difference operator
        hbar: Reduced Planck constant used by the finite-difference operator

    Examples:
        >>> system = WellSystem(grid=Grid(steps=50), shape="square", amplitude=1.0)
        >>> system = WellSystem.create("kronig_penney", steps=200, amplitude=50.0)
    """
    grid: Grid
    shape: Any = "square"
    amplitude: float = 0.0
    mass: float = 1.0
    hbar: float = 1.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        from .potentials import resolve_shape

        self.shape = resolve_shape(self.shape)
        try:
            self.amplitude = float(self.amplitude)
        except (TypeError, ValueError):
            raise InvalidParameterError(f"Amplitude must be a real number, got {self.amplitude!r}")
        if not math.isfinite(self.amplitude):
            raise InvalidParameterError(f"Amplitude must be finite, got {self.amplitude}")
        for name in ('mass', 'hbar'):
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidParameterError(f"{name} must be a real number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidParameterError(f"{name} must be positive and finite, got {value}")
            setattr(self, name, value)

    @classmethod
    def create(cls, name: str, **kwargs) -> "WellSystem":
        """Factory method to create a well from a shape name.

        Args:
            name: Shape key ('square', 'linear', 'kronig_penney', ...) or label
            **kwargs: ``steps``, ``bounds`` or ``width``, ``amplitude``,
                ``mass``, ``hbar``

        Returns:
            Configured WellSystem instance

        Examples:
            >>> system = WellSystem.create('square_barrier', steps=100, amplitude=3.0)
            >>> system = WellSystem.create('linear', width=20.0, amplitude=0.5)
        """
        from .potentials import POTENTIALS, resolve_shape

        try:
            shape = resolve_shape(name)
        except InvalidParameterError:
            available = sorted(POTENTIALS.keys())
            suggestions = []
            key = str(name).lower().replace(" ", "_")
            for pot_name in available:
                if key in pot_name or pot_name in key:
                    suggestions.append(pot_name)

            error_msg = f"Unknown shape '{name}'.\n"
            if suggestions:
                error_msg += f"Did you mean: {', '.join(suggestions)}?\n"
            error_msg += f"Available shapes: {', '.join(available)}"
            raise InvalidParameterError(error_msg)

        grid_params = {}
        if 'steps' in kwargs:
            grid_params['steps'] = kwargs.pop('steps')
        if 'width' in kwargs:
            grid_params['bounds'] = (0.0, kwargs.pop('width'))
        if 'bounds' in kwargs:
            grid_params['bounds'] = tuple(kwargs.pop('bounds'))

        grid = Grid(**grid_params)

        return cls(
            grid=grid,
            shape=shape,
            metadata={'name': shape.key},
            **kwargs
        )

    @property
    def name(self) -> str:
        """Shape key of the well"""
        return self.metadata.get('name', self.shape.key)

    @property
    def label(self) -> str:
        """Display label of the well shape"""
        return self.shape.label

    def profile(self):
        """Potential profile sampled on the grid (read-only).

        Sampled afresh on every call, so it always reflects the current
        shape, amplitude and grid.
        """
        from .potentials import generate_potential

        return generate_potential(
            self.grid.bounds[0],
            self.grid.bounds[1],
            self.grid.steps,
            self.shape,
            self.amplitude,
        )

    def info(self) -> Dict[str, Any]:
        """Get system information"""
        return {
            'name': self.name,
            'label': self.label,
            'amplitude': self.amplitude,
            'steps': self.grid.steps,
            'grid_points': self.grid.points,
            'grid_bounds': self.grid.bounds,
            'grid_spacing': self.grid.dx,
            'mass': self.mass,
            'hbar': self.hbar,
        }

    def __repr__(self) -> str:
        return f"WellSystem(name='{self.name}', amplitude={self.amplitude}, grid={self.grid})"


@dataclass
class Result:
    """Container for solver results.

    Attributes:
        energies: Ascending array of eigenvalues
        eigenvectors: Orthonormal eigenvectors (column ``i`` belongs to ``energies[i]``)
        system: The well that was solved
        hamiltonian: Matrix that was diagonalized (dense or sparse)
        profile: Potential profile the Hamiltonian was built from
        info: Additional solver information
    """
    energies: NDArray
    eigenvectors: NDArray
    system: Optional[WellSystem] = None
    hamiltonian: Any = None
    profile: Any = None
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_states(self) -> int:
        """Number of computed states"""
        return len(self.energies)

    @property
    def energy(self) -> float:
        """Ground state energy (convenience property)"""
        return self.energies[0]

    @property
    def eigenvector(self) -> NDArray:
        """Ground state eigenvector (convenience property)"""
        return self.eigenvectors[:, 0]

    def get_state(self, n: int) -> Tuple[float, NDArray]:
        """Get nth eigenstate (energy, eigenvector)"""
        if n >= self.n_states:
            raise IndexError(f"Only {self.n_states} states computed")
        return self.energies[n], self.eigenvectors[:, n]

    def reconstruct(self) -> NDArray:
        """Rebuild ``V diag(E) V^T`` from the computed eigenpairs.

        Only equal to the diagonalized matrix when every eigenpair was kept.
        """
        V = self.eigenvectors
        return (V * self.energies) @ V.T

    def residual_norms(self) -> NDArray:
        """Norms of ``H v - E v`` for every computed state"""
        if self.hamiltonian is None:
            raise ValueError("Result does not hold the diagonalized matrix")
        H = self.hamiltonian
        residuals = np.zeros(self.n_states)
        for i in range(self.n_states):
            v = self.eigenvectors[:, i]
            residuals[i] = np.linalg.norm(H @ v - self.energies[i] * v)
        return residuals

    def wavefunction(self, n: int = 0) -> NDArray:
        """Wavefunction of state ``n`` on the full grid.

        Only meaningful for finite-difference results, whose eigenvectors
        are sampled on the interior points. The wall samples are zero and
        the result is normalized so that the integral of ``|psi|^2`` is 1.
        """
        if self.info.get('hamiltonian') != 'finite_difference':
            raise ValueError("Wavefunctions on the grid need a finite_difference result")
        _, vec = self.get_state(n)
        positions = self.profile.positions
        psi = np.zeros(len(positions))
        psi[1:-1] = vec
        return normalize_wavefunction(psi, positions)

    def __repr__(self) -> str:
        return (
            f"Result(E0={self.energy:.6g}, n_states={self.n_states}, "
            f"time={self.info.get('solve_time', 0):.3f}s)"
        )


# Utility functions
def normalize_wavefunction(psi: NDArray, x: Union[NDArray, Grid]) -> NDArray:
    """Normalize a wavefunction on a 1D grid."""
    if isinstance(x, Grid):
        x = x.x
    norm = np.sqrt(np.trapezoid(np.abs(psi) ** 2, x))
    return psi / norm
