import numbers

import numpy as np


class DimensionError(ValueError):
    """Raised when matrix shapes do not line up for an operation."""


def _storage_dtype(values):
    # plain reals live in float64, anything else (Complex) falls back to objects
    for v in values:
        if not isinstance(v, numbers.Real):
            return object
    return np.float64


class Matrix:
    """Dense 2D matrix over a numeric scalar type.

    The backing store is a numpy array in ``self.data``. Every arithmetic
    operator returns a new Matrix; only ``set`` and ``randomize`` mutate.
    """

    __array_ufunc__ = None

    def __init__(self, data=None):
        if data is None:
            self.data = np.zeros((0, 0), dtype=np.float64)
            return

        if isinstance(data, Matrix):
            self.data = data.data.copy()
            return

        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise DimensionError(f"Matrix needs a 2D array, got shape {data.shape}")
            # bool, int and float arrays become float64, anything else keeps its values as objects
            dtype = np.float64 if data.dtype.kind in "biuf" else object
            self.data = np.array(data, dtype=dtype)
            return

        rows = [list(row) for row in data]
        if not rows:
            self.data = np.zeros((0, 0), dtype=np.float64)
            return

        cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise DimensionError(
                    f"Row {i} has {len(row)} elements, expected {cols}"
                )

        dtype = _storage_dtype(v for row in rows for v in row)
        self.data = np.empty((len(rows), cols), dtype=dtype)
        for i, row in enumerate(rows):
            for j, v in enumerate(row):
                self.data[i, j] = v

    @classmethod
    def zeros(cls, rows, cols):
        return cls(np.zeros((rows, cols), dtype=np.float64))

    @classmethod
    def from_vector(cls, values, column=True):
        """Build an N x 1 (column) or 1 x N (row) matrix from a flat sequence."""
        values = list(values)
        if column:
            return cls([[v] for v in values]) if values else cls.zeros(0, 1)
        return cls([values]) if values else cls.zeros(1, 0)

    @classmethod
    def random(cls, rows, cols, low=-1.0, high=1.0, rng=None):
        m = cls.zeros(rows, cols)
        m.randomize(low, high, rng=rng)
        return m

    @property
    def rows(self):
        return self.data.shape[0]

    @property
    def cols(self):
        return self.data.shape[1]

    @property
    def shape(self):
        return self.data.shape

    def _check_index(self, row, col):
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(
                f"Matrix index ({row}, {col}) out of bounds for shape {self.shape}"
            )

    def get(self, row, col):
        self._check_index(row, col)
        return self.data[row, col]

    def set(self, row, col, value):
        self._check_index(row, col)
        if self.data.dtype != object and not isinstance(value, numbers.Real):
            # first non-real value promotes the storage
            self.data = self.data.astype(object)
        self.data[row, col] = value

    def __getitem__(self, index):
        row, col = index
        return self.get(row, col)

    def __setitem__(self, index, value):
        row, col = index
        self.set(row, col, value)

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            raise DimensionError(
                f"Matrix dimensions must match for addition: {self.shape} vs {other.shape}"
            )
        return Matrix(self.data + other.data)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            raise DimensionError(
                f"Matrix dimensions must match for subtraction: {self.shape} vs {other.shape}"
            )
        return Matrix(self.data - other.data)

    def matmul(self, other):
        if self.cols != other.rows:
            raise DimensionError(
                f"Invalid matrix dimensions for multiplication: {self.shape} x {other.shape}"
            )
        if self.data.dtype == object or other.data.dtype == object:
            # object arrays go through an explicit sum so the scalar type's own
            # + and * are used
            a = self.data.astype(object)
            b = other.data.astype(object)
            out = np.empty((self.rows, other.cols), dtype=object)
            for i in range(self.rows):
                for j in range(other.cols):
                    total = 0.0
                    for k in range(self.cols):
                        total = total + a[i, k] * b[k, j]
                    out[i, j] = total
            return Matrix(out)
        return Matrix(self.data @ other.data)

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.matmul(other)

    def scale(self, scalar):
        return Matrix(self.data * scalar)

    def __mul__(self, other):
        # Matrix * Matrix is the matrix product, Matrix * scalar scales
        if isinstance(other, Matrix):
            return self.matmul(other)
        return self.scale(other)

    def __rmul__(self, other):
        return self.scale(other)

    def randomize(self, low=-1.0, high=1.0, rng=None):
        """Fill every entry with an independent uniform draw in [low, high]."""
        rng = rng if rng is not None else np.random.default_rng()
        self.data = rng.uniform(low, high, size=self.shape)

    def flatten(self):
        return self.data.reshape(-1).tolist()

    def allclose(self, other, atol=1e-8):
        if self.shape != other.shape:
            return False
        if self.data.dtype == object or other.data.dtype == object:
            return all(abs(a - b) <= atol for a, b in zip(self.flatten(), other.flatten()))
        return bool(np.allclose(self.data, other.data, atol=atol))

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self.flatten() == other.flatten()

    __hash__ = None

    def __repr__(self):
        return f"Matrix(rows={self.rows}, cols={self.cols}, data={self.data.tolist()})"
