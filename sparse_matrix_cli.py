"""
Sparse Matrix Operations - Command Line Interface

Usage:
    python sparse_matrix_cli.py            # interactive: load two files, pick an operation, save
    python sparse_matrix_cli.py test       # run the built-in self checks
    python sparse_matrix_cli.py --verify   # cross-check the result with scipy before saving
"""

import argparse
import logging
from itertools import islice

from tabulate import tabulate

from sparse_addition import (
    add_matrices,
    subtract_matrices,
    verify_addition_scipy,
    verify_subtraction_scipy,
)
from sparse_matrix import DimensionMismatchError, FormatError, SparseMatrix
from sparse_multiplication import multiply_matrices, verify_multiplication_scipy


logger = logging.getLogger(__name__)


DEFAULT_OUTPUT_FILE = "result.txt"
DEFAULT_MAX_PRINT = 20

# choice -> (name, operation, scipy verification)
OPERATIONS = {
    '1': ("Addition", add_matrices, verify_addition_scipy),
    '2': ("Subtraction", subtract_matrices, verify_subtraction_scipy),
    '3': ("Multiplication", multiply_matrices, verify_multiplication_scipy),
}


def print_matrix(matrix: SparseMatrix, max_print: int = DEFAULT_MAX_PRINT):
    """Print shape, nnz and the first `max_print` entries as a grid table."""
    print(f"Shape: {matrix.rows} × {matrix.cols}, {matrix.nnz():,} nonzeros")

    table_data = [list(entry) for entry in islice(matrix.iter_entries(), max_print)]
    if table_data:
        print(tabulate(table_data, headers=["Row", "Col", "Value"], tablefmt="grid"))

    if matrix.nnz() > max_print:
        print(f"... {matrix.nnz() - max_print:,} more entries")


# ============================================================================
# Self Checks
# ============================================================================

def run_self_checks() -> bool:
    """
    Run the built-in sanity checks for addition, subtraction and multiplication.

    Returns:
        True if every check passed
    """
    print("Running tests...")

    m1 = SparseMatrix(3, 3)
    m1.set_element(0, 1, 5)
    m1.set_element(1, 2, 10)

    m2 = SparseMatrix(3, 3)
    m2.set_element(0, 1, 2)
    m2.set_element(1, 2, 8)

    mult_a = SparseMatrix(1, 2)
    mult_a.set_element(0, 0, 1)
    mult_a.set_element(0, 1, 2)

    mult_b = SparseMatrix(2, 1)
    mult_b.set_element(0, 0, 3)
    mult_b.set_element(1, 0, 4)

    zeroed = SparseMatrix(2, 2)
    zeroed.set_element(1, 1, 7)
    zeroed.set_element(1, 1, 0)

    add_result = add_matrices(m1, m2)
    sub_result = subtract_matrices(m1, m2)
    mult_result = multiply_matrices(mult_a, mult_b)

    try:
        multiply_matrices(m1, mult_a)
        mismatch_detected = False
    except DimensionMismatchError:
        mismatch_detected = True

    checks = [
        ("Addition", add_result.get_element(0, 1) == 7 and add_result.get_element(1, 2) == 18),
        ("Subtraction", sub_result.get_element(0, 1) == 3 and sub_result.get_element(1, 2) == 2),
        ("Multiplication", mult_result.shape == (1, 1) and mult_result.get_element(0, 0) == 11),
        ("Dimension check", mismatch_detected),
        ("Zero removal", zeroed.get_element(1, 1) == 0 and zeroed.nnz() == 0),
    ]

    for name, passed in checks:
        print(f"{'✓' if passed else '✗'} {name} test {'passed' if passed else 'failed'}")

    all_passed = all(passed for _, passed in checks)
    print("Tests completed")
    return all_passed


# ============================================================================
# Interactive Flow
# ============================================================================

def run_interactive(max_print: int = DEFAULT_MAX_PRINT, verify: bool = False) -> int:
    """
    Prompt for two matrix files and an operation, then save the result.

    Returns:
        Process exit code
    """
    print("Sparse Matrix Operations")

    try:
        file_a = input("Enter path for first matrix file: ").strip()
        file_b = input("Enter path for second matrix file: ").strip()

        mat_a = SparseMatrix.from_file(file_a)
        mat_b = SparseMatrix.from_file(file_b)

        print("\nChoose operation:\n1. Addition\n2. Subtraction\n3. Multiplication")
        choice = input("Enter your choice (1/2/3): ").strip()

        if choice not in OPERATIONS:
            print("✗ Invalid choice!")
            return 1

        name, operation, verify_fn = OPERATIONS[choice]
        logger.info(f"Running {name.lower()}")
        result = operation(mat_a, mat_b)

    except (FormatError, DimensionMismatchError, OSError) as e:
        print(f"✗ Error: {e}")
        return 1

    print("\nResult matrix:")
    print_matrix(result, max_print)

    if verify:
        if not verify_fn(mat_a, mat_b, result):
            print("✗ Verification against scipy failed, result not saved")
            return 1
        print("✓ Verified against scipy.sparse")

    output_file = input(f"\nEnter output file name (default: {DEFAULT_OUTPUT_FILE}): ").strip()
    output_file = output_file or DEFAULT_OUTPUT_FILE

    try:
        result.save_to_file(output_file)
    except OSError as e:
        print(f"✗ Error: {e}")
        return 1

    print(f"✓ Result saved to {output_file}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sparse matrix addition, subtraction and multiplication")
    parser.add_argument('mode', nargs='?', choices=['test'], help="'test' runs the built-in self checks")
    parser.add_argument('--verify', action='store_true', help='Cross-check the result with scipy.sparse')
    parser.add_argument('--max-print', type=int, default=DEFAULT_MAX_PRINT,
                        help='Maximum number of result entries to print')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s: %(message)s')

    if args.mode == 'test':
        return 0 if run_self_checks() else 1

    return run_interactive(max_print=args.max_print, verify=args.verify)


if __name__ == "__main__":
    raise SystemExit(main())
