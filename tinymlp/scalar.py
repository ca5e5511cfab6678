import math
import numbers


class Complex:
    """Immutable complex scalar usable as a Matrix element.

    Supports +, - and * against other Complex values or bare reals. There is
    deliberately no division.
    """

    __slots__ = ("_real", "_imag")

    def __init__(self, real=0.0, imag=0.0):
        self._real = real
        self._imag = imag

    @property
    def real(self):
        return self._real

    @property
    def imag(self):
        return self._imag

    @property
    def magnitude(self):
        return math.sqrt(self._real * self._real + self._imag * self._imag)

    def __abs__(self):
        return self.magnitude

    @staticmethod
    def _lift(other):
        if isinstance(other, Complex):
            return other
        if isinstance(other, numbers.Real):
            return Complex(other, 0.0)
        return None

    def __add__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Complex(self._real + other._real, self._imag + other._imag)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Complex(self._real - other._real, self._imag - other._imag)

    def __rsub__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        if isinstance(other, numbers.Real):
            return Complex(self._real * other, self._imag * other)
        if not isinstance(other, Complex):
            return NotImplemented
        return Complex(
            self._real * other._real - self._imag * other._imag,
            self._real * other._imag + self._imag * other._real,
        )

    __rmul__ = __mul__

    def __neg__(self):
        return Complex(-self._real, -self._imag)

    def __eq__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return self._real == other._real and self._imag == other._imag

    def __hash__(self):
        # equal to the matching built-in number, so hash like it
        return hash(complex(self._real, self._imag))

    def __repr__(self):
        return f"Complex(real={self._real}, imag={self._imag})"

    def __str__(self):
        sign = "+" if self._imag >= 0 else ""
        return f"{self._real}{sign}{self._imag}i"
