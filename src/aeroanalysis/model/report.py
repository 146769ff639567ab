"""
Report Field Extraction
=======================
Pulls the numbers the rest of the application needs (drag and lift
coefficients, peak pressures) out of the free-form analysis text.

Why is this file needed?
------------------------
The text service has no schema: whatever figures it mentions are written in
prose. Every downstream consumer (summary table, force bars, CSV export) reads
the parsed `ReportFields` instead of the text, so all the pattern matching
lives here and nowhere else.

A missing figure is `None`, never an exception. The patterns only match
well-formed decimal literals, so a successful match always parses.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Optional

_NUMBER = r"(-?\d+(?:\.\d+)?)"

CD_PATTERN = re.compile(r"(?:drag coefficient \(Cd\)|\bCd)\s*[:≈~]?\s*" + _NUMBER, re.IGNORECASE)
CL_PATTERN = re.compile(r"(?:lift coefficient \(Cl\)|\bCl)\s*[:≈~]?\s*" + _NUMBER, re.IGNORECASE)
# The number may not start inside a longer digit run, which keeps the scan linear
PEAK_GAUGE_PATTERN = re.compile(r"peak gauge pressure\s*.*?(?<![\d.])" + _NUMBER + r"\s*Pa", re.IGNORECASE)
PEAK_NEGATIVE_PATTERN = re.compile(r"peak negative pressure\s*.*?(?<![\d.])" + _NUMBER + r"\s*Pa", re.IGNORECASE)

# Bars never scale against anything smaller than this
MIN_BAR_SCALE = 0.1


@dataclass(frozen=True)
class ReportFields:
    """Numbers found in an analysis report. `None` means not mentioned."""
    cd: Optional[float] = None
    cl: Optional[float] = None
    peak_gauge: Optional[float] = None
    peak_negative: Optional[float] = None

    @property
    def lift_to_drag_ratio(self) -> Optional[float]:
        if self.cd is None or self.cl is None or self.cd == 0:
            return None
        return self.cl / self.cd

    @property
    def has_coefficients(self) -> bool:
        return self.cd is not None or self.cl is not None

    @property
    def has_pressure(self) -> bool:
        return self.peak_gauge is not None or self.peak_negative is not None

    @property
    def has_any(self) -> bool:
        return self.has_coefficients or self.has_pressure

    @property
    def lift_label(self) -> str:
        if self.cl is not None and self.cl < 0:
            return "Downforce (Cl)"
        return "Lift (Cl)"

    def relative_force_magnitudes(self) -> tuple[float, float]:
        """
        Drag and lift bar lengths as fractions of the larger coefficient.

        Absent coefficients have length 0. The scale is floored at
        MIN_BAR_SCALE so tiny coefficients do not fill the whole bar.
        """
        cd = abs(self.cd) if self.cd is not None else 0.0
        cl = abs(self.cl) if self.cl is not None else 0.0
        scale = max(cd, cl, MIN_BAR_SCALE)
        return cd / scale, cl / scale


def _first_number(pattern: re.Pattern, text: str) -> Optional[float]:
    match = pattern.search(text)
    if match is None:
        return None
    value = float(match.group(1))
    # A digit run too long for a float overflows to inf
    return value if math.isfinite(value) else None


def extract_report_fields(text: object) -> ReportFields:
    """Parse the four quantitative fields out of `text`."""
    if not isinstance(text, str) or not text:
        return ReportFields()

    return ReportFields(
        cd=_first_number(CD_PATTERN, text),
        cl=_first_number(CL_PATTERN, text),
        peak_gauge=_first_number(PEAK_GAUGE_PATTERN, text),
        peak_negative=_first_number(PEAK_NEGATIVE_PATTERN, text),
    )


@dataclass(frozen=True)
class AnalysisReport:
    """The generated text together with the fields parsed from it."""
    text: str = ""
    fields: ReportFields = field(default_factory=ReportFields)

    @classmethod
    def from_text(cls, text: str) -> AnalysisReport:
        return cls(text=text, fields=extract_report_fields(text))

    @property
    def is_empty(self) -> bool:
        return not self.text
