import pytest
import numpy as np
import Qwell


class TestBasicFunctionality:
    def test_import(self):
        """Test that package imports correctly."""
        assert hasattr(Qwell, 'WellSystem')
        assert hasattr(Qwell, 'solve_quick')
        assert hasattr(Qwell, 'Grid')

    def test_version(self):
        """Test version is accessible."""
        assert hasattr(Qwell, '__version__')
        assert isinstance(Qwell.__version__, str)

    def test_error_hierarchy(self):
        assert issubclass(Qwell.InvalidParameterError, ValueError)
        assert issubclass(Qwell.NumericalNonConvergenceError, RuntimeError)


class TestGrid:
    def test_points(self):
        grid = Qwell.Grid(steps=9, bounds=(0, 10))
        assert grid.points == 11
        assert grid.dx == pytest.approx(1.0)
        np.testing.assert_allclose(grid.x, np.arange(11.0))
        assert len(grid.interior) == 9
        assert grid.size == 10.0

    @pytest.mark.parametrize("steps", [0, -5, 2.5, "10", True])
    def test_bad_steps(self, steps):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.Grid(steps=steps)

    @pytest.mark.parametrize("bounds", [(1, 0), (3, 3), (0, np.nan), (0,)])
    def test_bad_bounds(self, bounds):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.Grid(steps=10, bounds=bounds)

    def test_numpy_integer_steps(self):
        grid = Qwell.Grid(steps=np.int64(4))
        assert grid.points == 6


class TestWellSystem:
    @pytest.mark.parametrize("name", Qwell.list_potentials())
    def test_create(self, name):
        system = Qwell.WellSystem.create(name, steps=20, amplitude=2.0)
        assert system.name == name
        assert system.label == Qwell.shape_name(name)
        positions, potentials = system.profile()
        assert len(positions) == 22

    def test_create_width(self):
        system = Qwell.WellSystem.create("linear", width=4.0, steps=3)
        assert system.grid.bounds == (0.0, 4.0)

    def test_create_unknown_suggests(self):
        with pytest.raises(Qwell.InvalidParameterError, match="Did you mean: square_barrier"):
            Qwell.WellSystem.create("barrier")

    @pytest.mark.parametrize("amplitude", [np.nan, np.inf, "tall"])
    def test_bad_amplitude(self, amplitude):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.WellSystem.create("square", amplitude=amplitude)

    def test_profile_follows_amplitude(self):
        system = Qwell.WellSystem.create("square", steps=5, amplitude=1.0)
        _, before = system.profile()
        system.amplitude = 3.0
        _, after = system.profile()
        assert np.all(before[1:-1] == 1.0)
        assert np.all(after[1:-1] == 3.0)

    def test_profile_follows_shape(self):
        system = Qwell.WellSystem.create("square", steps=9, amplitude=2.0)
        system.shape = Qwell.PotentialType.LINEAR
        positions, potentials = system.profile()
        expected = Qwell.generate_potential(0.0, 10.0, 9, "linear", 2.0)
        np.testing.assert_array_equal(potentials, expected.potentials)

    def test_solve_after_mutation(self):
        system = Qwell.WellSystem.create("square", steps=6, amplitude=1.0)
        first = Qwell.solve_eigenstates(system, n_states=2)
        system.amplitude = 4.0
        second = Qwell.solve_eigenstates(system, n_states=2)
        assert np.all(first.profile.potentials[1:-1] == 1.0)
        assert np.all(second.profile.potentials[1:-1] == 4.0)
        fresh = Qwell.solve_quick("square", steps=6, amplitude=4.0, n_states=2)
        np.testing.assert_allclose(second.energies, fresh.energies)

    @pytest.mark.parametrize("name", ["mass", "hbar"])
    @pytest.mark.parametrize("value", ["heavy", None, np.nan, np.inf, 0, -1.0])
    def test_bad_mass_hbar(self, name, value):
        with pytest.raises(Qwell.InvalidParameterError, match=name):
            Qwell.WellSystem.create("square", **{name: value})

    def test_mass_hbar_converted(self):
        system = Qwell.WellSystem.create("square", mass=2, hbar=np.float32(0.5))
        assert type(system.mass) is float
        assert system.hbar == 0.5

    def test_info(self):
        system = Qwell.WellSystem.create("kronig_penney", steps=30, amplitude=5.0)
        info = system.info()
        assert info['label'] == "Kronig Penney"
        assert info['grid_points'] == 32
        assert info['amplitude'] == 5.0


class TestResult:
    def test_state_access(self):
        result = Qwell.solve_quick("linear", steps=30, n_states=3,
                                   hamiltonian="finite_difference")
        assert result.n_states == 3
        E, v = result.get_state(2)
        assert E == result.energies[2]
        np.testing.assert_array_equal(result.eigenvector, result.eigenvectors[:, 0])
        with pytest.raises(IndexError):
            result.get_state(3)

    def test_wavefunction_normalized(self):
        result = Qwell.solve_quick("quadratic", steps=80, amplitude=0.5, n_states=2,
                                   bounds=(-5.0, 5.0), hamiltonian="finite_difference")
        x = result.system.grid.x
        for n in range(2):
            psi = result.wavefunction(n)
            assert psi[0] == 0.0 and psi[-1] == 0.0
            assert np.trapezoid(psi**2, x) == pytest.approx(1.0)

    def test_wavefunction_needs_finite_difference(self):
        result = Qwell.solve_quick("square", steps=5, n_states=2)
        with pytest.raises(ValueError):
            result.wavefunction(0)

    def test_reconstruct(self):
        result = Qwell.solve_quick("square_barrier", steps=4, amplitude=3.0, n_states=6)
        H = result.hamiltonian
        np.testing.assert_allclose(result.reconstruct(), H, atol=1e-12 * np.linalg.norm(H))

    def test_repr(self):
        result = Qwell.solve_quick("square", steps=5)
        assert repr(result).startswith("Result(E0=")
