#!/usr/bin/env python3
"""
Qwell CLI - Command line interface for quick well calculations

Examples:
    qwell-cli square --states 5
    qwell-cli square_barrier --amplitude 3 --steps 200 --hamiltonian finite_difference
    qwell-cli kronig_penney --width 20 --potential
    qwell-cli list
"""

import argparse
import logging
import sys
import numpy as np
import Qwell


def list_systems():
    """List all available well shapes"""
    shapes = Qwell.list_potentials()
    print("\nAvailable well shapes:")
    print("-" * 45)
    for name in shapes:
        print(f"  {name:<28}{Qwell.shape_name(name)}")
    print(f"\nTotal: {len(shapes)} shapes")
    print("\nExample: qwell-cli square_barrier --amplitude 3 --states 3")


def format_energy(energy, precision=6):
    """Format energy value with appropriate precision"""
    return f"{energy:.{precision}g}"


def build_parser():
    parser = argparse.ArgumentParser(
        prog="qwell-cli",
        description="Qwell CLI - Energy levels of shaped 1D wells",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qwell-cli square                                  # Coupling matrix of a square well
  qwell-cli square --hamiltonian finite_difference  # Particle-in-a-box energies
  qwell-cli linear --amplitude 2 --states 5         # 5 states of a tilted well
  qwell-cli kronig_penney --width 20 --potential    # Print the sampled profile
  qwell-cli list                                    # List all available shapes
        """
    )

    # Positional argument
    parser.add_argument(
        'shape',
        nargs='?',
        help='Well shape to solve (e.g., square, linear, square_barrier)'
    )

    # Optional arguments
    parser.add_argument(
        '-n', '--states',
        type=int,
        default=1,
        help='Number of eigenstates to compute (default: 1)'
    )

    parser.add_argument(
        '--steps',
        type=int,
        default=100,
        help='Number of interior grid samples (default: 100)'
    )

    bounds = parser.add_mutually_exclusive_group()
    bounds.add_argument(
        '-w', '--width',
        type=float,
        help='Well width, domain [0, WIDTH] (default: 10)'
    )
    bounds.add_argument(
        '-b', '--bounds',
        type=float,
        nargs=2,
        metavar=('MIN', 'MAX'),
        help='Wall positions'
    )

    parser.add_argument(
        '-a', '--amplitude',
        type=float,
        default=1.0,
        help='Shape amplitude: height, slope or curvature (default: 1)'
    )

    parser.add_argument(
        '--hamiltonian',
        choices=['coupling', 'finite_difference'],
        default='coupling',
        help='Matrix to diagonalize (default: coupling)'
    )

    parser.add_argument(
        '-m', '--method',
        choices=['auto', 'jacobi', 'dense', 'sparse'],
        default='auto',
        help='Eigensolver (default: auto)'
    )

    parser.add_argument(
        '--max-iterations',
        type=int,
        help='Iteration budget of the eigensolver'
    )

    parser.add_argument(
        '--info',
        action='store_true',
        help='Show detailed information about the result'
    )

    parser.add_argument(
        '--potential',
        action='store_true',
        help='Print the sampled potential profile'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log solver progress'
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    # Handle special cases
    if not args.shape or args.shape == 'list':
        list_systems()
        return 0

    try:
        kwargs = {
            'n_states': args.states,
            'steps': args.steps,
            'amplitude': args.amplitude,
            'hamiltonian': args.hamiltonian,
            'method': args.method,
            'verbose': args.verbose,
        }
        if args.width is not None:
            kwargs['width'] = args.width
        if args.bounds:
            kwargs['bounds'] = tuple(args.bounds)
        if args.max_iterations is not None:
            kwargs['max_iterations'] = args.max_iterations

        result = Qwell.solve_quick(args.shape, **kwargs)
        system = result.system

        print(f"\n{system.label} (amplitude={system.amplitude:g}, {args.hamiltonian} Hamiltonian)")
        for i, E in enumerate(result.energies):
            print(f"  E_{i} = {format_energy(E)}")

        if args.info:
            print(f"\nSystem information:")
            print(f"  Steps: {system.grid.steps}")
            print(f"  Grid bounds: {system.grid.bounds}")
            print(f"  Grid spacing: {system.grid.dx:.6f}")
            print(f"  Matrix size: {result.info['matrix_size']}")
            print(f"  Method: {result.info['method']}")
            print(f"  Iterations: {result.info.get('iterations', '-')}")
            print(f"  Solver time: {result.info['solve_time']:.3f}s")
            print(f"  Max residual: {np.max(result.residual_norms()):.3e}")

        if args.potential:
            positions, potentials = result.profile
            print(f"\nPotential profile ({len(positions)} samples):")
            for x, V in zip(positions, potentials):
                print(f"  {x:12.6f}  {V:.6g}")

    except (Qwell.InvalidParameterError, Qwell.NumericalNonConvergenceError) as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
