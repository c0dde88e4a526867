# -----------------------------------------------------------------------------
# Complex numbers
# Purpose: parse complex values typed as text, in rectangular ("3 - 4i") or
# polar ("5∠90°", "1<0.5rad") form, and format them back in either form.
# Parsers return None for malformed text rather than raising.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
import sys
from dataclasses import dataclass
from typing import List, Optional

EPSILON = sys.float_info.epsilon

# angle unit suffixes, longest match first ("rad" ends in "d")
ANGLE_SUFFIXES = (("°", True), ("deg", True), ("rad", False), ("d", True), ("r", False))


def _num(x: float) -> str:
    # 3.0 -> "3", 0.5 -> "0.5"
    if math.isfinite(x) and x.is_integer():
        return f"{x:.0f}"
    return repr(x)


@dataclass(frozen=True)
class ComplexNumber:
    real: float = 0.0
    imaginary: float = 0.0

    @staticmethod
    def from_polar(magnitude: float, angle_radians: float) -> "ComplexNumber":
        return ComplexNumber(magnitude * math.cos(angle_radians),
                             magnitude * math.sin(angle_radians))

    def magnitude(self) -> float:
        return math.hypot(self.real, self.imaginary)

    def angle(self) -> float:
        """Argument in radians, (-pi, pi]."""
        return math.atan2(self.imaginary, self.real)

    def angle_degrees(self) -> float:
        return math.degrees(self.angle())

    def conjugate(self) -> "ComplexNumber":
        return ComplexNumber(self.real, -self.imaginary)

    def __add__(self, other: "ComplexNumber") -> "ComplexNumber":
        return ComplexNumber(self.real + other.real, self.imaginary + other.imaginary)

    def __sub__(self, other: "ComplexNumber") -> "ComplexNumber":
        return ComplexNumber(self.real - other.real, self.imaginary - other.imaginary)

    def __mul__(self, other: "ComplexNumber") -> "ComplexNumber":
        return ComplexNumber(
            self.real * other.real - self.imaginary * other.imaginary,
            self.real * other.imaginary + self.imaginary * other.real,
        )

    def divide(self, other: "ComplexNumber") -> Optional["ComplexNumber"]:
        """Quotient, or None when dividing by zero."""
        denom = other.real * other.real + other.imaginary * other.imaginary
        if denom == 0.0:
            return None
        return ComplexNumber(
            (self.real * other.real + self.imaginary * other.imaginary) / denom,
            (self.imaginary * other.real - self.real * other.imaginary) / denom,
        )

    def is_real(self) -> bool:
        return abs(self.imaginary) < EPSILON

    def is_imaginary(self) -> bool:
        return abs(self.real) < EPSILON

    def to_rectangular_string(self) -> str:
        sign = "+" if self.imaginary >= 0.0 else "-"
        return f"{_num(self.real)} {sign} {_num(abs(self.imaginary))}i"

    def to_polar_string(self, degrees: bool = True) -> str:
        if degrees:
            return f"{_num(self.magnitude())}∠{_num(self.angle_degrees())}°"
        return f"{_num(self.magnitude())}∠{_num(self.angle())} rad"

    def to_exponential_string(self) -> str:
        return f"{_num(self.magnitude())}·e^({_num(self.angle())}i)"

    def __complex__(self) -> complex:
        return complex(self.real, self.imaginary)

    def __str__(self) -> str:
        return self.to_rectangular_string()


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


def _split_signed_terms(text: str) -> List[str]:
    # "3 - 4i" -> ["3", "-4i"]; a leading sign stays on the first term and an
    # exponent sign ("1e-3") stays inside its number
    parts: List[str] = []
    current = ""
    for i, ch in enumerate(text):
        if ch in "+-" and current.strip() and i > 0 and not current.endswith("e"):
            parts.append(current.strip())
            current = ch
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def parse_rectangular(text: str) -> Optional[ComplexNumber]:
    s = text.strip().lower()

    # pure imaginary: "5i", "i"
    if s.endswith("i") and "+" not in s and "-" not in s:
        imag_str = s.rstrip("i").strip()
        if not imag_str:
            return ComplexNumber(0.0, 1.0)
        imag = _to_float(imag_str)
        if imag is not None:
            return ComplexNumber(0.0, imag)

    parts = _split_signed_terms(s)
    if not parts:
        return None

    real = 0.0
    imaginary = 0.0
    for part in parts:
        if part.endswith("i"):
            imag_str = part.rstrip("i").replace(" ", "")
            if imag_str in ("", "+"):
                imaginary = 1.0
            elif imag_str == "-":
                imaginary = -1.0
            else:
                value = _to_float(imag_str)
                if value is None:
                    return None
                imaginary = value
        else:
            value = _to_float(part.replace(" ", ""))
            if value is None:
                return None
            real = value
    return ComplexNumber(real, imaginary)


def parse_polar(text: str, angle_in_degrees: bool = True) -> Optional[ComplexNumber]:
    """
    Parse "r∠θ" (or "r<θ"). An explicit unit suffix on θ wins over
    `angle_in_degrees`: '°', 'deg', 'd' mean degrees; 'rad', 'r' radians.
    """
    s = text.strip()
    if "∠" in s:
        parts = s.split("∠")
    elif "<" in s:
        parts = s.split("<")
    else:
        return None
    if len(parts) != 2:
        return None

    magnitude = _to_float(parts[0].strip())
    if magnitude is None:
        return None

    angle_str = parts[1].strip().lower()
    degrees = angle_in_degrees
    for suffix, is_degrees in ANGLE_SUFFIXES:
        if angle_str.endswith(suffix):
            angle_str = angle_str[: -len(suffix)].strip()
            degrees = is_degrees
            break
    angle = _to_float(angle_str)
    if angle is None:
        return None

    return ComplexNumber.from_polar(magnitude, math.radians(angle) if degrees else angle)


def parse_complex(text: str, angle_in_degrees: bool = True) -> Optional[ComplexNumber]:
    if "∠" in text or "<" in text:
        return parse_polar(text, angle_in_degrees)
    return parse_rectangular(text)
