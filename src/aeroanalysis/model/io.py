"""
Input/Output Manager (CSV)
Writes the quantitative fields of an analysis report to a two-column CSV file.
"""
import logging
import os
from typing import Optional, Union

import numpy as np

from aeroanalysis.errors import ExportEmptyError
from aeroanalysis.model.report import ReportFields

logger = logging.getLogger(__name__)

CSV_HEADER = ("Parameter", "Value")

EMPTY_EXPORT_NOTICE = (
    "No quantitative data found in the analysis to export. Try generating an analysis focused on "
    "'Aerodynamic Forces' or 'Pressure Contours' for more data."
)


def _fixed(value: Optional[float], decimals: int) -> Optional[str]:
    return None if value is None else f"{value:.{decimals}f}"


def _raw(value: Optional[float]) -> Optional[str]:
    # Shortest round-trip digits, never in exponent notation (1e-05 -> 0.00001)
    return None if value is None else np.format_float_positional(float(value), trim="-")


class ExportManager:

    @staticmethod
    def rows(fields: ReportFields) -> list[tuple[str, str]]:
        """(label, formatted value) for every field present, in export order."""
        candidates = [
            ("Drag Coefficient (Cd)", _raw(fields.cd)),
            ("Lift Coefficient (Cl)", _raw(fields.cl)),
            ("L/D Ratio", _fixed(fields.lift_to_drag_ratio, 3)),
            ("Peak Gauge Pressure (Pa)", _fixed(fields.peak_gauge, 2)),
            ("Peak Negative Pressure (Pa)", _fixed(fields.peak_negative, 2)),
        ]
        return [(label, value) for label, value in candidates if value is not None]

    @staticmethod
    def build_csv(fields: ReportFields) -> str:
        rows = ExportManager.rows(fields)
        if not rows:
            raise ExportEmptyError(EMPTY_EXPORT_NOTICE)

        lines = [",".join(CSV_HEADER)]
        lines.extend(f'"{label}",{value}' for label, value in rows)
        return "\n".join(lines)

    @staticmethod
    def export_csv(fields: ReportFields, filepath: Union[str, os.PathLike]) -> str:
        """Write the CSV file. Nothing is written when there is no data."""
        content = ExportManager.build_csv(fields)

        logger.info(f"Exporting analysis data to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.exception(f"Failed to export analysis data: {e}")
            raise

        return os.fspath(filepath)
