"""
Configuration & Constants
=========================
This module serves as the central registry for global constants and the
runtime settings of the analysis service.

Why is this file needed?
------------------------
1. Abstraction: Wind limits, timer cadence and file names are defined once
   instead of being scattered through the model and the widgets.
2. Deployment: Settings such as the model name or the API key can come from
   the persistent QSettings store or be overridden by environment variables,
   without touching code.

Exports:
    DEFAULT_WIND_SPEED, MIN_WIND_SPEED, MAX_WIND_SPEED, DEFAULT_WIND_DIRECTION
    TICK_INTERVAL_MS, PROGRESS_STEP
    AnalysisSettings, load_settings()
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QSettings


# Wind conditions (m/s, degrees clockwise from North)
DEFAULT_WIND_SPEED: float = 10.0
MIN_WIND_SPEED: float = 0.1
MAX_WIND_SPEED: float = 50.0
DEFAULT_WIND_DIRECTION: int = 0

# Simulated run timeline
TICK_INTERVAL_MS: int = 500
PROGRESS_STEP: int = 5

# Standard sea-level air density (kg/m³), used for the dynamic pressure hint
AIR_DENSITY: float = 1.225

# Model ingestion / export
MODEL_FILE_FILTER: str = "3D Models (*.stl *.obj *.ply)"
DEFAULT_EXPORT_FILENAME: str = "simulation_analysis_data.csv"

# Text-generation service
DEFAULT_ANALYSIS_MODEL: str = "gpt-4o-mini"

ENV_MODEL = "AEROANALYSIS_MODEL"
ENV_API_KEY = "OPENAI_API_KEY"
ENV_LOG_LEVEL = "AEROANALYSIS_LOG_LEVEL"


@dataclass(frozen=True)
class AnalysisSettings:
    """Runtime settings of the report generator."""
    model: str = DEFAULT_ANALYSIS_MODEL
    api_key: Optional[str] = None
    log_level: str = "INFO"


def load_settings(settings: Optional[QSettings] = None) -> AnalysisSettings:
    """
    Read settings from QSettings, then apply environment overrides.

    Level precedence: environment > QSettings > defaults.
    """
    store = settings if settings is not None else QSettings()

    model = str(store.value("analysis/model", DEFAULT_ANALYSIS_MODEL) or DEFAULT_ANALYSIS_MODEL)
    log_level = str(store.value("logging/level", "INFO") or "INFO")

    model = os.getenv(ENV_MODEL) or model
    log_level = os.getenv(ENV_LOG_LEVEL) or log_level
    api_key = os.getenv(ENV_API_KEY) or None

    return AnalysisSettings(model=model, api_key=api_key, log_level=log_level.upper())
