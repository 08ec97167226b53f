# Fixed-size 2x2 linear algebra for the theory engine
# FORBIDDEN: logging, any I/O
#
# Scalars are Python floats, complex values are the builtin ``complex``.

import cmath
import math
from typing import NamedTuple, Tuple

from ..core.errors import SingularSystem

Complex = complex

# Determinants below this magnitude are treated as singular
SINGULAR_EPS = 1e-12


class Vector2(NamedTuple):
    x: float
    y: float

    def scaled(self, k: float) -> "Vector2":
        return Vector2(self.x * k, self.y * k)


class Matrix2(NamedTuple):
    """Row-major 2x2 matrix [[a11, a12], [a21, a22]]."""
    a11: float
    a12: float
    a21: float
    a22: float

    @classmethod
    def identity(cls) -> "Matrix2":
        return cls(1.0, 0.0, 0.0, 1.0)

    def trace(self) -> float:
        return self.a11 + self.a22

    def det(self) -> float:
        return self.a11 * self.a22 - self.a12 * self.a21

    def plus(self, other: "Matrix2") -> "Matrix2":
        return Matrix2(*(p + q for p, q in zip(self, other)))

    def minus(self, other: "Matrix2") -> "Matrix2":
        return Matrix2(*(p - q for p, q in zip(self, other)))

    def scaled(self, k: float) -> "Matrix2":
        return Matrix2(*(p * k for p in self))

    def dot(self, v: Vector2) -> Vector2:
        return Vector2(self.a11 * v.x + self.a12 * v.y, self.a21 * v.x + self.a22 * v.y)

    def matmul(self, other: "Matrix2") -> "Matrix2":
        return Matrix2(
            self.a11 * other.a11 + self.a12 * other.a21,
            self.a11 * other.a12 + self.a12 * other.a22,
            self.a21 * other.a11 + self.a22 * other.a21,
            self.a21 * other.a12 + self.a22 * other.a22,
        )

    def inverse(self) -> "Matrix2":
        """Closed-form inverse.

        Raises:
            SingularSystem: If the determinant is numerically zero
        """
        det = self.det()
        if abs(det) < SINGULAR_EPS:
            raise SingularSystem(f"Matrix is singular (det={det:.3e})")
        return Matrix2(self.a22 / det, -self.a12 / det, -self.a21 / det, self.a11 / det)


def solve_complex_2x2(
    m11: Complex,
    m12: Complex,
    m21: Complex,
    m22: Complex,
    rhs1: Complex,
    rhs2: Complex,
) -> Tuple[Complex, Complex]:
    """Solve a complex 2x2 system by Cramer's rule.

    Raises:
        SingularSystem: If the complex determinant is numerically zero
    """
    det = m11 * m22 - m12 * m21
    if abs(det) < SINGULAR_EPS:
        raise SingularSystem(f"Complex system is singular (|det|={abs(det):.3e})")
    x1 = (rhs1 * m22 - m12 * rhs2) / det
    x2 = (m11 * rhs2 - rhs1 * m21) / det
    return x1, x2


def matrix_exponential(a: Matrix2, t: float) -> Matrix2:
    """exp(A t) in closed form.

    With s = trace/2 and M = A - s I, M² = d I where d = s² - det. The series
    then collapses to e^{st} (c I + k M) with (c, k) chosen by the sign of d:
    cosh/sinh for distinct real eigenvalues, cos/sin for a complex pair and
    (1, t) for a repeated eigenvalue.

    Args:
        a: System matrix
        t: Time in s

    Returns:
        Matrix exponential
    """
    s = 0.5 * a.trace()
    disc = s * s - a.det()
    m = a.minus(Matrix2.identity().scaled(s))
    scale = math.exp(s * t)

    if abs(disc) <= 1e-12 * max(1.0, s * s):
        c, k = 1.0, t
    elif disc > 0:
        root = math.sqrt(disc)
        c, k = math.cosh(root * t), math.sinh(root * t) / root
    else:
        root = math.sqrt(-disc)
        c, k = math.cos(root * t), math.sin(root * t) / root

    return Matrix2.identity().scaled(c).plus(m.scaled(k)).scaled(scale)


def eigenvalues(a: Matrix2) -> Tuple[Complex, Complex]:
    """Roots of lambda² - trace lambda + det = 0."""
    s = 0.5 * a.trace()
    root = cmath.sqrt(s * s - a.det())
    return complex(s + root), complex(s - root)
