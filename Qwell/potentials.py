"""
qwell/potentials.py - Well and barrier potential profiles

Every profile is sampled on ``steps + 2`` points spanning ``[x_min, x_max]``.
The first and last samples are pinned to ``MXVAL``, which stands in for the
infinite walls of the box.
"""

import math
from enum import Enum
from typing import Callable, NamedTuple, Union

import numpy as np
from numpy.typing import NDArray

from .Core import Grid, InvalidParameterError


MXVAL = 1.0e7  # wall height


class PotentialProfile(NamedTuple):
    """Sampled positions and potential values, walls included."""
    positions: NDArray
    potentials: NDArray


class PotentialType(Enum):
    SQUARE = ("square", "Square Well")
    LINEAR = ("linear", "Linear Well")
    QUADRATIC = ("quadratic", "Quadratic Well")
    CENTERED_QUADRATIC = ("centered_quadratic", "Centered Quadratic Well")
    SQUARE_BARRIER = ("square_barrier", "Square Barrier")
    TRIANGLE_BARRIER = ("triangle_barrier", "Triangle Barrier")
    SQUARE_PLUS_LINEAR = ("square_plus_linear", "Square+Linear")
    COUPLED_QUADRATIC = ("coupled_quadratic", "Coupled Quadratic")
    COUPLED_SQUARE_PLUS_FIELD = ("coupled_square_plus_field", "Coupled Square+Field")
    KRONIG_PENNEY = ("kronig_penney", "Kronig Penney")

    @property
    def key(self) -> str:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    def __str__(self) -> str:
        return self.label


def resolve_shape(shape: Union[PotentialType, str]) -> PotentialType:
    """Turn a shape key, display label or enum member into a PotentialType."""
    if isinstance(shape, PotentialType):
        return shape
    if isinstance(shape, str):
        name = shape.strip()
        for member in PotentialType:
            if name.lower() in (member.key, member.label.lower(), member.name.lower()):
                return member
    available = ", ".join(member.key for member in PotentialType)
    raise InvalidParameterError(f"Unknown shape '{shape}'. Available: {available}")


def shape_name(shape: Union[PotentialType, str]) -> str:
    """Display label for a shape, e.g. ``"Coupled Square+Field"``."""
    return resolve_shape(shape).label


def _check_amplitude(amplitude: float) -> float:
    try:
        amplitude = float(amplitude)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Amplitude must be a real number, got {amplitude!r}")
    if not math.isfinite(amplitude):
        raise InvalidParameterError(f"Amplitude must be finite, got {amplitude}")
    return amplitude


def _frozen(positions: NDArray, potentials: NDArray) -> PotentialProfile:
    positions = np.asarray(positions, dtype=float)
    potentials = np.asarray(potentials, dtype=float)
    positions.flags.writeable = False
    potentials.flags.writeable = False
    return PotentialProfile(positions, potentials)


def general_well(
    x_min: float,
    x_max: float,
    steps: int,
    potential_func: Callable[[NDArray], NDArray],
) -> PotentialProfile:
    """Sample ``potential_func`` between two infinite walls.

    Args:
        x_min: Left wall position
        x_max: Right wall position
        steps: Number of interior samples
        potential_func: Vectorized ``V(x)`` evaluated on the interior samples

    Returns:
        PotentialProfile with ``steps + 2`` entries
    """
    grid = Grid(steps=steps, bounds=(x_min, x_max))
    x = grid.interior
    V = np.empty(grid.points)
    V[0] = MXVAL
    V[1:-1] = np.broadcast_to(potential_func(x), x.shape)
    V[-1] = MXVAL
    return _frozen(grid.x, V)


def square_well(x_min: float, x_max: float, steps: int, height: float = 0.0) -> PotentialProfile:
    """Flat floor at ``height``."""
    height = _check_amplitude(height)
    return general_well(x_min, x_max, steps, lambda x: np.full_like(x, height))


def linear_well(x_min: float, x_max: float, steps: int, slope: float = 1.0) -> PotentialProfile:
    """V(x) = slope * x"""
    slope = _check_amplitude(slope)
    return general_well(x_min, x_max, steps, lambda x: slope * x)


def quadratic_well(x_min: float, x_max: float, steps: int, amplitude: float = 1.0) -> PotentialProfile:
    """V(x) = A * x²"""
    amplitude = _check_amplitude(amplitude)
    return general_well(x_min, x_max, steps, lambda x: amplitude * x**2)


def centered_quadratic_well(
    x_min: float, x_max: float, steps: int, amplitude: float = 1.0
) -> PotentialProfile:
    """Parabola about the midpoint, cut to zero outside ``(0.5*mid, 1.5*mid)``."""
    amplitude = _check_amplitude(amplitude)
    mid = (x_min + x_max) / 2

    def V(x):
        inside = (x > 0.5 * mid) & (x < 1.5 * mid)
        return np.where(inside, amplitude * (x - mid)**2, 0.0)

    return general_well(x_min, x_max, steps, V)


def square_barrier(x_min: float, x_max: float, steps: int, amplitude: float = 1.0) -> PotentialProfile:
    """Barrier of height ``amplitude`` over the middle fifth of the well."""
    amplitude = _check_amplitude(amplitude)
    span = x_max - x_min
    left = x_min + 0.4 * span
    right = x_min + 0.6 * span

    def V(x):
        return np.where((x >= left) & (x <= right), amplitude, 0.0)

    return general_well(x_min, x_max, steps, V)


def triangle_barrier(x_min: float, x_max: float, steps: int, amplitude: float = 1.0) -> PotentialProfile:
    """Tent-shaped barrier rising from ``0.4*x_max`` to ``0.5*x_max`` and back down
    at ``0.6*x_max``.

    ``amplitude`` is the slope of the flanks, so the peak is ``0.1*amplitude*x_max``.
    """
    amplitude = _check_amplitude(amplitude)

    def V(x):
        rising = (x > 0.4 * x_max) & (x < 0.5 * x_max)
        falling = (x >= 0.5 * x_max) & (x <= 0.6 * x_max)
        values = np.zeros_like(x)
        values[rising] = amplitude * (x[rising] - 0.4 * x_max)
        values[falling] = -amplitude * (x[falling] - 0.6 * x_max)
        return values

    return general_well(x_min, x_max, steps, V)


def square_plus_linear(x_min: float, x_max: float, steps: int, amplitude: float = 1.0) -> PotentialProfile:
    """Flat floor for the first half of the samples, then a field ``(x - mid) * A``."""
    amplitude = _check_amplitude(amplitude)
    mid = (x_min + x_max) / 2.0

    def V(x):
        index = np.arange(1, len(x) + 1)
        return np.where(index < steps // 2, 0.0, (x - mid) * amplitude)

    return general_well(x_min, x_max, steps, V)


def coupled_square_plus_field(
    x_min: float, x_max: float, steps: int, amplitude: float = 1.0
) -> PotentialProfile:
    """Two square wells coupled through a plateau of height ``amplitude``.

    Zero on the first 40% of the well, ``amplitude`` on ``[0.4, 0.6)`` of the
    span and zero again on the last 40%.
    """
    amplitude = _check_amplitude(amplitude)
    span = x_max - x_min
    left = x_min + 0.4 * span
    right = x_min + 0.6 * span

    def V(x):
        return np.where((x >= left) & (x < right), amplitude, 0.0)

    return general_well(x_min, x_max, steps, V)


def kronig_penney(
    x_min: float,
    x_max: float,
    steps: int,
    amplitude: float = 1.0,
    n_barriers: int = 2,
) -> PotentialProfile:
    """Periodic array of square barriers.

    Barriers are ``amplitude`` high, spaced ``x_max / n_barriers`` apart and a
    sixth of the spacing wide, centred at ``-spacing/2 + k*spacing`` for
    ``k = 1..n_barriers``. The centres are indexed by barrier number ``k``,
    not by sample index; a per-sample centre would leave the profile
    almost free of barriers.
    """
    amplitude = _check_amplitude(amplitude)
    if n_barriers < 1:
        raise InvalidParameterError(f"n_barriers must be at least 1, got {n_barriers}")
    spacing = x_max / n_barriers
    width = spacing / 6.0
    centers = -spacing / 2.0 + spacing * np.arange(1, n_barriers + 1)

    def V(x):
        inside = np.any(np.abs(x[:, None] - centers[None, :]) < width / 2.0, axis=1)
        return np.where(inside, amplitude, 0.0)

    return general_well(x_min, x_max, steps, V)


def coupled_quadratic(x_min: float, x_max: float, steps: int, amplitude: float = 1.0) -> PotentialProfile:
    """Two parabolic wells centred at a quarter and three quarters of the span."""
    amplitude = _check_amplitude(amplitude)
    span = x_max - x_min
    mid = (x_min + x_max) / 2.0
    left_center = x_min + span / 4.0
    right_center = x_max - span / 4.0

    def V(x):
        return np.where(
            x < mid,
            amplitude * (x - left_center)**2,
            amplitude * (x - right_center)**2,
        )

    return general_well(x_min, x_max, steps, V)


# Registry of all available shapes
POTENTIALS = {
    PotentialType.SQUARE.key: square_well,
    PotentialType.LINEAR.key: linear_well,
    PotentialType.QUADRATIC.key: quadratic_well,
    PotentialType.CENTERED_QUADRATIC.key: centered_quadratic_well,
    PotentialType.SQUARE_BARRIER.key: square_barrier,
    PotentialType.TRIANGLE_BARRIER.key: triangle_barrier,
    PotentialType.SQUARE_PLUS_LINEAR.key: square_plus_linear,
    PotentialType.COUPLED_QUADRATIC.key: coupled_quadratic,
    PotentialType.COUPLED_SQUARE_PLUS_FIELD.key: coupled_square_plus_field,
    PotentialType.KRONIG_PENNEY.key: kronig_penney,
}


def list_potentials() -> list[str]:
    """List all available shape keys."""
    return list(POTENTIALS.keys())


def generate_potential(
    x_min: float,
    x_max: float,
    steps: int,
    shape: Union[PotentialType, str],
    amplitude: float,
) -> PotentialProfile:
    """Sample a well/barrier shape on ``steps + 2`` points.

    Args:
        x_min: Left wall position
        x_max: Right wall position
        steps: Number of interior samples (at least 1)
        shape: PotentialType, shape key or display label
        amplitude: Height, slope or curvature, depending on the shape

    Returns:
        ``(positions, potentials)``; both ends of ``potentials`` equal ``MXVAL``

    Raises:
        InvalidParameterError: For bad steps, bounds, amplitude or shape
    """
    shape = resolve_shape(shape)
    return POTENTIALS[shape.key](x_min, x_max, steps, amplitude)


get_potential = generate_potential
