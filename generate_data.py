"""
Sparse Matrix Data Generator
Generates synthetic integer sparse matrices in the rows=/cols= text format.

Features:
- Control matrix size and sparsity
- Unique coordinates, nonzero integer values
- Random and banded patterns
- Progress tracking
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from tqdm import tqdm

from sparse_matrix import SparseMatrix


logger = logging.getLogger(__name__)


DEFAULT_VALUE_RANGE = (-9, 9)


class SparseMatrixGenerator:
    """Generate synthetic sparse matrices for testing."""

    def __init__(self, output_dir: str = "data/input"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _nonzero_values(count: int, value_range: Tuple[int, int]) -> np.ndarray:
        """Draw `count` random nonzero integers from [low, high]."""
        low, high = value_range
        choices = np.array([v for v in range(low, high + 1) if v != 0], dtype=np.int64)
        if len(choices) == 0:
            raise ValueError(f"Value range {value_range} contains no nonzero integers")
        return np.random.choice(choices, size=count)

    def _write(self, matrix: SparseMatrix, filename: str) -> Path:
        filepath = self.output_dir / filename
        logger.info(f"Writing {matrix.nnz():,} entries to {filepath}...")
        matrix.save_to_file(filepath)
        logger.info(f"✓ Generated {filepath} ({filepath.stat().st_size / 1024:.1f} KB)")
        return filepath

    def generate_random(
        self,
        num_rows: int,
        num_cols: int,
        nnz: int,
        filename: str,
        seed: Optional[int] = None,
        value_range: Tuple[int, int] = DEFAULT_VALUE_RANGE
    ) -> Path:
        """
        Generate random sparse matrix with uniformly placed unique entries.

        Args:
            num_rows: Number of rows
            num_cols: Number of columns
            nnz: Number of nonzeros
            filename: Output filename
            seed: Random seed for reproducibility
            value_range: Inclusive (low, high) range for values (0 excluded)

        Returns:
            Path to generated file
        """
        logger.info(f"Generating random matrix: {num_rows}×{num_cols}, {nnz:,} nonzeros")

        total_possible = num_rows * num_cols
        if nnz > total_possible:
            raise ValueError(f"Cannot generate {nnz} unique entries in {num_rows}×{num_cols} matrix")

        if seed is not None:
            np.random.seed(seed)

        positions = np.random.choice(total_possible, size=nnz, replace=False)
        rows = positions // num_cols
        cols = positions % num_cols
        values = self._nonzero_values(nnz, value_range)

        matrix = SparseMatrix(num_rows, num_cols)
        for i in tqdm(range(nnz), desc="Building entries", unit=" entries", leave=False):
            matrix.set_element(int(rows[i]), int(cols[i]), int(values[i]))

        return self._write(matrix, filename)

    def generate_banded(
        self,
        size: int,
        bandwidth: int,
        filename: str,
        seed: Optional[int] = None,
        value_range: Tuple[int, int] = DEFAULT_VALUE_RANGE
    ) -> Path:
        """
        Generate banded matrix (nonzeros near diagonal).

        Args:
            size: Matrix size (size × size)
            bandwidth: Number of diagonals on each side of main diagonal
            filename: Output filename
            seed: Random seed
            value_range: Inclusive (low, high) range for values (0 excluded)

        Returns:
            Path to generated file
        """
        logger.info(f"Generating banded matrix: {size}×{size}, bandwidth={bandwidth}")

        if seed is not None:
            np.random.seed(seed)

        matrix = SparseMatrix(size, size)
        for i in tqdm(range(size), desc="Building rows", leave=False):
            row_cols = [i + k for k in range(-bandwidth, bandwidth + 1) if 0 <= i + k < size]
            values = self._nonzero_values(len(row_cols), value_range)
            for j, v in zip(row_cols, values):
                matrix.set_element(i, j, int(v))

        return self._write(matrix, filename)


def generate_preset_matrices(output_dir: str = "data/input"):
    """Generate a small set of matrix pairs for trying out the CLI."""
    generator = SparseMatrixGenerator(output_dir)

    presets = [
        ("small_A.txt", "random", {"num_rows": 10, "num_cols": 10, "nnz": 15}),
        ("small_B.txt", "random", {"num_rows": 10, "num_cols": 10, "nnz": 15}),
        ("medium_A.txt", "random", {"num_rows": 1000, "num_cols": 1000, "nnz": 5000}),
        ("medium_B.txt", "random", {"num_rows": 1000, "num_cols": 1000, "nnz": 5000}),
        ("banded_100.txt", "banded", {"size": 100, "bandwidth": 2}),
    ]

    logger.info(f"Generating {len(presets)} preset matrices...")

    generated_files = []
    for seed, (filename, pattern, params) in enumerate(presets):
        if pattern == "random":
            filepath = generator.generate_random(**params, filename=filename, seed=seed)
        else:
            filepath = generator.generate_banded(**params, filename=filename, seed=seed)
        generated_files.append(filepath)

    logger.info(f"✓ Generated {len(generated_files)} matrices in {output_dir}")
    return generated_files


def main(argv=None):
    """Command-line interface for data generation."""
    parser = argparse.ArgumentParser(
        description="Generate sparse integer matrices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate all preset matrices
  python generate_data.py --preset

  # Generate custom random matrix
  python generate_data.py --random --rows 500 --cols 400 --nnz 2000 -o a.txt

  # Generate banded matrix
  python generate_data.py --banded --size 500 --bandwidth 3 -o banded.txt
        """
    )

    parser.add_argument('--output-dir', default='data/input', help='Output directory')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    parser.add_argument('--log-level', default='INFO', help='Logging level')

    parser.add_argument('--preset', action='store_true', help='Generate all preset test matrices')
    parser.add_argument('--random', action='store_true', help='Generate random matrix')
    parser.add_argument('--banded', action='store_true', help='Generate banded matrix')

    parser.add_argument('--rows', type=int, help='Number of rows')
    parser.add_argument('--cols', type=int, help='Number of columns')
    parser.add_argument('--nnz', type=int, help='Number of nonzeros')
    parser.add_argument('--size', type=int, help='Matrix size (for square matrices)')
    parser.add_argument('--bandwidth', type=int, help='Bandwidth for banded matrices')
    parser.add_argument('--min-value', type=int, default=DEFAULT_VALUE_RANGE[0], help='Smallest value')
    parser.add_argument('--max-value', type=int, default=DEFAULT_VALUE_RANGE[1], help='Largest value')

    parser.add_argument('-o', '--output', help='Output filename')

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s: %(message)s')

    if args.preset:
        generate_preset_matrices(args.output_dir)
        return 0

    generator = SparseMatrixGenerator(args.output_dir)
    value_range = (args.min_value, args.max_value)

    if args.random:
        if None in (args.rows, args.cols, args.nnz, args.output):
            parser.error("--random requires --rows, --cols, --nnz, and -o")

        generator.generate_random(
            num_rows=args.rows,
            num_cols=args.cols,
            nnz=args.nnz,
            filename=args.output,
            seed=args.seed,
            value_range=value_range
        )

    elif args.banded:
        if None in (args.size, args.bandwidth, args.output):
            parser.error("--banded requires --size, --bandwidth, and -o")

        generator.generate_banded(
            size=args.size,
            bandwidth=args.bandwidth,
            filename=args.output,
            seed=args.seed,
            value_range=value_range
        )

    else:
        parser.print_help()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
