"""
Analysis Orchestrator
=====================
Runs one report generation: compose the prompt, call the text service once,
and turn any failure into a fixed message for the user.

The `is_generating` flag is backed by a non-blocking lock that is released in
a `finally`, so it drops back to False on success, on failure and on any
unexpected exception. A second call made while one is in flight is ignored.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from aeroanalysis.controller.text_service import TextGenerator
from aeroanalysis.errors import ServiceFailure
from aeroanalysis.model.prompts import AnalysisRequest, build_prompt

logger = logging.getLogger(__name__)

ANALYSIS_ERROR_MESSAGE = "Error: Could not generate analysis from the AI model."


class AnalysisOrchestrator:

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator
        self._busy = threading.Lock()

    @property
    def is_generating(self) -> bool:
        return self._busy.locked()

    def generate(self, request: AnalysisRequest) -> Optional[str]:
        """
        Returns the report text, ANALYSIS_ERROR_MESSAGE when the service
        failed, or None when the call was ignored because another one is
        still running.
        """
        if not self._busy.acquire(blocking=False):
            logger.warning("Analysis already in progress; request ignored.")
            return None

        try:
            prompt = build_prompt(request)
            logger.info(
                f"Generating analysis for '{request.object_name}' "
                f"({request.visualization.value}, {request.wind_speed:g} m/s, {request.wind_direction}°)."
            )
            text = self.generator.generate(prompt)
            if not isinstance(text, str) or not text.strip():
                raise ServiceFailure("Empty analysis text.")
            logger.info(f"Analysis received ({len(text)} characters).")
            return text
        except Exception:
            logger.exception("Error generating analysis")
            return ANALYSIS_ERROR_MESSAGE
        finally:
            self._busy.release()
