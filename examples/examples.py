#!/usr/bin/env python3
"""
Qwell Examples

This script demonstrates the main features of the library.
Run individual examples or all of them to see the library in action.
"""

import Qwell
import numpy as np


def example_profiles():
    """Example 1: Sample every well shape"""
    print("\n" + "="*60)
    print("Example 1: Potential Profiles")
    print("="*60)

    for shape in Qwell.PotentialType:
        positions, potentials = Qwell.generate_potential(0.0, 10.0, 100, shape, 2.0)
        interior = potentials[1:-1]
        print(f"  {shape.label:<26} min={interior.min():8.3f}  max={interior.max():8.3f}")


def example_coupling_matrix():
    """Example 2: The compatibility coupling Hamiltonian"""
    print("\n" + "="*60)
    print("Example 2: Coupling Hamiltonian")
    print("="*60)

    result = Qwell.solve_well(10.0, 50, "square_barrier", 3.0, n_states=4)

    print(f"Matrix size: {result.info['matrix_size']}, "
          f"Jacobi sweeps: {result.info['iterations']}")
    for i, E in enumerate(result.energies):
        print(f"  E_{i} = {E:.6e}")


def example_particle_in_box():
    """Example 3: Finite-difference energies of an empty box"""
    print("\n" + "="*60)
    print("Example 3: Particle in a Box")
    print("="*60)

    result = Qwell.solve_quick(
        "square", amplitude=0.0, bounds=(0.0, 1.0), steps=400,
        n_states=5, hamiltonian="finite_difference",
    )

    print("Energy levels:")
    for n, E in enumerate(result.energies, start=1):
        print(f"  n={n}: E = {E:.6f} (theory: {n**2 * np.pi**2 / 2:.6f})")


def example_double_well():
    """Example 4: Tunnelling splitting in the coupled quadratic well"""
    print("\n" + "="*60)
    print("Example 4: Coupled Quadratic Well")
    print("="*60)

    for amplitude in [0.5, 1.0, 2.0, 4.0]:
        result = Qwell.solve_quick(
            "coupled_quadratic", amplitude=amplitude, width=10.0, steps=400,
            n_states=2, hamiltonian="finite_difference", method="sparse",
        )
        splitting = result.energies[1] - result.energies[0]
        print(f"  A={amplitude:4.1f}: E0={result.energy:.6f}  splitting={splitting:.3e}")


def example_kronig_penney():
    """Example 5: Bands forming in a Kronig-Penney well"""
    print("\n" + "="*60)
    print("Example 5: Kronig-Penney Barriers")
    print("="*60)

    from Qwell.potentials import kronig_penney

    profile = kronig_penney(0.0, 20.0, 800, amplitude=40.0, n_barriers=6)
    H = Qwell.build_finite_difference_hamiltonian(profile)
    E, _ = Qwell.solve_eigenproblem(H, method="dense")
    print("Lowest 12 levels:")
    print("  " + "  ".join(f"{e:.3f}" for e in E[:12]))


def main():
    example_profiles()
    example_coupling_matrix()
    example_particle_in_box()
    example_double_well()
    example_kronig_penney()


if __name__ == "__main__":
    main()
