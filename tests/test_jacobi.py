"""
Test suite for the Jacobi eigenvalue solver
"""

import pytest
import numpy as np
import Qwell
from Qwell.solvers.jacobi import jacobi_eigh, fix_signs, check_symmetric


def random_symmetric(n, seed=0):
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((n, n))
    return A + A.T


class TestJacobiSolver:
    """Test Jacobi eigenvalue solver implementation"""

    def test_diagonal_matrix(self):
        """Diagonal input is already converged"""
        E, V = Qwell.solve_eigenproblem(np.diag([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(E, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(np.abs(V), np.eye(3))

    def test_diagonal_matrix_is_sorted(self):
        E, V = Qwell.solve_eigenproblem(np.diag([3.0, 1.0, 2.0]))
        np.testing.assert_allclose(E, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(np.abs(V[:, 0]), [0.0, 1.0, 0.0])
        np.testing.assert_allclose(np.abs(V[:, 1]), [0.0, 0.0, 1.0])
        np.testing.assert_allclose(np.abs(V[:, 2]), [1.0, 0.0, 0.0])

    def test_two_by_two(self):
        E, V = Qwell.solve_eigenproblem(np.array([[2.0, 1.0], [1.0, 2.0]]))
        np.testing.assert_allclose(E, [1.0, 3.0])
        np.testing.assert_allclose(np.abs(V), np.full((2, 2), np.sqrt(0.5)))

    @pytest.mark.parametrize("n", [1, 2, 5, 12, 30])
    def test_matches_lapack(self, n):
        """Jacobi and numpy.linalg.eigh agree"""
        A = random_symmetric(n, seed=n)
        E, _ = Qwell.solve_eigenproblem(A, method="jacobi")
        ref = np.linalg.eigh(A)[0]
        np.testing.assert_allclose(E, ref, atol=1e-12 * np.linalg.norm(A))

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_orthonormal_eigenvectors(self, seed):
        A = random_symmetric(10, seed=seed)
        _, V = Qwell.solve_eigenproblem(A)
        np.testing.assert_allclose(V.T @ V, np.eye(10), atol=1e-12)

    @pytest.mark.parametrize("seed", [3, 4, 5])
    def test_reconstruction(self, seed):
        """V diag(E) V^T reproduces the input"""
        A = random_symmetric(9, seed=seed)
        E, V = Qwell.solve_eigenproblem(A)
        np.testing.assert_allclose((V * E) @ V.T, A, atol=1e-12 * np.linalg.norm(A))

    def test_ascending(self):
        E, _ = Qwell.solve_eigenproblem(random_symmetric(15, seed=7))
        assert all(E[i] <= E[i + 1] for i in range(len(E) - 1))

    def test_degenerate(self):
        E, V = Qwell.solve_eigenproblem(2.0 * np.eye(4))
        np.testing.assert_allclose(E, 2.0)
        np.testing.assert_allclose(V.T @ V, np.eye(4))

    def test_zero_matrix(self):
        E, V = Qwell.solve_eigenproblem(np.zeros((3, 3)))
        np.testing.assert_allclose(E, 0.0)
        np.testing.assert_allclose(np.abs(V), np.eye(3))

    def test_badly_scaled(self):
        """Entries spanning many orders of magnitude"""
        A = np.array([[1e14, 1e7, 0.0], [1e7, -2e7, 1.0], [0.0, 1.0, -2e7]])
        E, V = Qwell.solve_eigenproblem(A)
        ref = np.linalg.eigh(A)[0]
        np.testing.assert_allclose(E, ref, atol=1e-12 * np.linalg.norm(A))
        np.testing.assert_allclose((V * E) @ V.T, A, atol=1e-12 * np.linalg.norm(A))

    def test_sweeps_reported(self):
        E, V, sweeps = jacobi_eigh(random_symmetric(6))
        assert 1 <= sweeps <= 20

    def test_dense_method(self):
        A = random_symmetric(8, seed=11)
        E_jac, V_jac = Qwell.solve_eigenproblem(A, method="jacobi")
        E_den, V_den = Qwell.solve_eigenproblem(A, method="dense")
        np.testing.assert_allclose(E_jac, E_den, atol=1e-11)
        overlaps = np.abs(np.sum(V_jac * V_den, axis=0))
        np.testing.assert_allclose(overlaps, 1.0, atol=1e-8)


class TestJacobiErrors:
    def test_non_convergence(self):
        """Exhausting the sweep budget raises instead of returning partial results"""
        A = random_symmetric(8, seed=1)
        with pytest.raises(Qwell.NumericalNonConvergenceError) as excinfo:
            Qwell.solve_eigenproblem(A, max_iterations=1)
        assert excinfo.value.iterations == 1
        assert excinfo.value.residual > 0

    def test_non_symmetric(self):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(np.array([[1.0, 2.0], [0.0, 1.0]]))

    def test_non_square(self):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(np.ones((2, 3)))

    def test_non_finite(self):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(np.array([[np.nan, 0.0], [0.0, 1.0]]))

    def test_empty(self):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(np.zeros((0, 0)))

    def test_unknown_method(self):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(np.eye(2), method="qr")

    @pytest.mark.parametrize("tol", [0.0, -1e-3])
    def test_bad_tolerance(self, tol):
        with pytest.raises(Qwell.InvalidParameterError):
            Qwell.solve_eigenproblem(random_symmetric(3), tolerance=tol)


class TestHelpers:
    def test_fix_signs(self):
        V = np.array([[0.6, -0.8], [-0.8, -0.6]])
        fixed = fix_signs(V)
        np.testing.assert_allclose(fixed, [[-0.6, 0.8], [0.8, 0.6]])

    def test_check_symmetric_accepts_sparse(self):
        from scipy.sparse import diags

        A = check_symmetric(diags([1.0, 2.0, 3.0]))
        assert isinstance(A, np.ndarray)
        np.testing.assert_allclose(A, np.diag([1.0, 2.0, 3.0]))
