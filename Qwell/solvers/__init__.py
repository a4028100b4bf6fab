"""
Eigenvalue solvers for Qwell
"""

from .jacobi import jacobi_eigh, solve_jacobi, check_symmetric, fix_signs

__all__ = ['jacobi_eigh', 'solve_jacobi', 'check_symmetric', 'fix_signs']
