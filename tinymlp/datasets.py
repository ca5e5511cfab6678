import csv
import itertools
import logging
import os
from collections import namedtuple

import numpy as np

from tinymlp.matrix import Matrix

logger = logging.getLogger(__name__)

Sample = namedtuple("Sample", ["inputs", "outputs"])
Dataset = namedtuple("Dataset", ["name", "samples", "input_dim", "output_dim"])

XOR_SHAPE = (2, 1)
ADDER_SHAPE = (5, 3)


def load_csv(path, input_dim, output_dim, name=None):
    """
    Load a dataset from a CSV file with a header row.

    Each row holds ``input_dim`` input columns followed by ``output_dim``
    output columns, all numeric.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset file not found: {path}")

    width = input_dim + output_dim
    samples = []
    with open(path, "r", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)  # header
        for line_no, row in enumerate(reader, start=2):
            if not row:
                continue
            if len(row) != width:
                raise ValueError(
                    f"{path}:{line_no}: expected {width} columns, got {len(row)}"
                )
            values = [float(v) for v in row]
            samples.append(Sample(tuple(values[:input_dim]), tuple(values[input_dim:])))

    name = name if name is not None else os.path.splitext(os.path.basename(path))[0]
    logger.debug("Loaded %d samples from %s", len(samples), path)
    return Dataset(name, samples, input_dim, output_dim)


def xor_dataset():
    samples = [
        Sample((float(a), float(b)), (float(a ^ b),))
        for a, b in itertools.product((0, 1), repeat=2)
    ]
    return Dataset("XOR", samples, *XOR_SHAPE)


def binary_adder_dataset():
    """Two 2-bit operands plus a carry-in, summed into a 3-bit result (MSB first)."""
    samples = []
    for bits in itertools.product((0, 1), repeat=5):
        a1, a0, b1, b0, carry = bits
        total = (a1 * 2 + a0) + (b1 * 2 + b0) + carry
        outputs = tuple(float((total >> shift) & 1) for shift in (2, 1, 0))
        samples.append(Sample(tuple(float(v) for v in bits), outputs))
    return Dataset("Binary Adder", samples, *ADDER_SHAPE)


def split_dataset(dataset, train_ratio, seed=42):
    """Shuffle with a fixed seed and cut into (train, test) datasets."""
    if not 0.0 < train_ratio < 1.0:
        raise ValueError(f"train_ratio must be strictly between 0 and 1, got {train_ratio}")

    rng = np.random.default_rng(seed)
    order = rng.permutation(len(dataset.samples))
    cutoff = int(len(dataset.samples) * train_ratio)

    train = [dataset.samples[i] for i in order[:cutoff]]
    test = [dataset.samples[i] for i in order[cutoff:]]
    return (
        Dataset(f"{dataset.name} (Train)", train, dataset.input_dim, dataset.output_dim),
        Dataset(f"{dataset.name} (Test)", test, dataset.input_dim, dataset.output_dim),
    )


def to_matrices(dataset):
    inputs = [Matrix.from_vector(s.inputs, column=True) for s in dataset.samples]
    outputs = [Matrix.from_vector(s.outputs, column=True) for s in dataset.samples]
    return inputs, outputs
