# -----------------------------------------------------------------------------
# Values with uncertainty
# Purpose: parse measured values typed as "10 ± 0.5", "100 ± 5%",
# "10 +/- 0.5" or "10 +0.5/-0.3" and render them in the usual notations.
# - Uncertainties are stored as non-negative half-widths above / below.
# - Parsers return None for malformed text rather than raising.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
import sys
from dataclasses import dataclass
from typing import Optional

EPSILON = sys.float_info.epsilon


@dataclass(frozen=True)
class UncertainValue:
    value: float = 0.0
    upper: float = 0.0   # above the value
    lower: float = 0.0   # below the value, stored positive

    @staticmethod
    def symmetric(value: float, uncertainty: float) -> "UncertainValue":
        return UncertainValue(value, abs(uncertainty), abs(uncertainty))

    @staticmethod
    def asymmetric(value: float, upper: float, lower: float) -> "UncertainValue":
        return UncertainValue(value, abs(upper), abs(lower))

    @staticmethod
    def from_relative(value: float, relative: float) -> "UncertainValue":
        return UncertainValue.symmetric(value, abs(value) * relative)

    @staticmethod
    def from_percentage(value: float, percentage: float) -> "UncertainValue":
        return UncertainValue.from_relative(value, percentage / 100.0)

    def is_symmetric(self) -> bool:
        return abs(self.upper - self.lower) < EPSILON

    def half_width(self) -> float:
        return (self.upper + self.lower) / 2.0

    def relative_uncertainty(self) -> float:
        # average of both sides relative to |value|; 0 for a zero value
        if abs(self.value) < EPSILON:
            return 0.0
        return self.half_width() / abs(self.value)

    def percentage_uncertainty(self) -> float:
        return self.relative_uncertainty() * 100.0

    def upper_bound(self) -> float:
        return self.value + self.upper

    def lower_bound(self) -> float:
        return self.value - self.lower

    def range(self) -> float:
        return self.upper + self.lower

    def to_symmetric_string(self, decimals: int = 4) -> str:
        return f"{self.value:.{decimals}f} ± {self.half_width():.{decimals}f}"

    def to_asymmetric_string(self, decimals: int = 4) -> str:
        return f"{self.value:.{decimals}f} +{self.upper:.{decimals}f}/−{self.lower:.{decimals}f}"

    def to_percentage_string(self, decimals: int = 4) -> str:
        return f"{self.value:.{decimals}f} ± {self.percentage_uncertainty():.1f}%"

    def to_scientific_string(self, sig_figs: int = 2) -> str:
        """(mantissa ± uncertainty) × 10^n, sharing the value's exponent."""
        if abs(self.value) < EPSILON:
            return f"(0 ± {self.upper:.{sig_figs}f}) × 10^0"
        exponent = math.floor(math.log10(abs(self.value)))
        scale = 10.0 ** exponent
        return (f"({self.value / scale:.{sig_figs}f} ± {self.half_width() / scale:.{sig_figs}f})"
                f" × 10^{exponent}")

    def __str__(self) -> str:
        if self.is_symmetric():
            return self.to_symmetric_string(4)
        return self.to_asymmetric_string(4)


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except ValueError:
        return None


def parse_symmetric(text: str) -> Optional[UncertainValue]:
    s = text.strip()

    if "±" in s:
        value_str, unc_str = s.split("±", 1)
        value = _to_float(value_str)
        if value is None:
            return None
        unc_str = unc_str.strip()
        if unc_str.endswith("%"):
            pct = _to_float(unc_str[:-1])
            return None if pct is None else UncertainValue.from_percentage(value, pct)
        unc = _to_float(unc_str)
        return None if unc is None else UncertainValue.symmetric(value, unc)

    if "+/-" in s:
        value_str, unc_str = s.split("+/-", 1)
        value = _to_float(value_str)
        unc = _to_float(unc_str)
        if value is None or unc is None:
            return None
        return UncertainValue.symmetric(value, unc)

    return None


def parse_asymmetric(text: str) -> Optional[UncertainValue]:
    s = text.strip()
    if "+" not in s:
        return None
    value_str, rest = s.split("+", 1)
    value = _to_float(value_str)
    if value is None:
        return None

    # both ASCII hyphen and the typographic minus are accepted
    if "/−" in rest:
        upper_str, lower_str = rest.split("/−", 1)
    elif "/-" in rest:
        upper_str, lower_str = rest.split("/-", 1)
    else:
        return None

    upper = _to_float(upper_str)
    lower = _to_float(lower_str)
    if upper is None or lower is None:
        return None
    return UncertainValue.asymmetric(value, upper, lower)


def parse_uncertain_value(text: str) -> Optional[UncertainValue]:
    """Symmetric form first, then asymmetric, then a bare number (zero uncertainty)."""
    for parse in (parse_symmetric, parse_asymmetric):
        parsed = parse(text)
        if parsed is not None:
            return parsed
    value = _to_float(text)
    if value is None:
        return None
    return UncertainValue.symmetric(value, 0.0)
