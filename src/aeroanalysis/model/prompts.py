"""
Analysis Request & Prompt Composition
=====================================
Turns the session (object name, wind, active overlay) into the text sent to
the report generator.

The active overlay decides the primary topic, which gets a detailed brief;
the remaining topics are asked for as a short secondary summary.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aeroanalysis.config import AIR_DENSITY
from aeroanalysis.model.state import SessionState
from aeroanalysis.model.visualization import VisualizationMode


class Topic(str, Enum):
    PRESSURE = "pressure"
    FLOW = "flow"
    FORCES = "forces"


SECONDARY_TITLES = {
    Topic.PRESSURE: "Pressure Distribution",
    Topic.FLOW: "Flow Pattern (separation, wake, etc.)",
    Topic.FORCES: "Key Aerodynamic Forces (drag and lift)",
}


@dataclass(frozen=True)
class AnalysisRequest:
    object_name: str
    wind_speed: float  # m/s
    wind_direction: int  # degrees
    visualization: VisualizationMode

    @classmethod
    def from_session(cls, session: SessionState) -> AnalysisRequest:
        name = session.model.object_name if session.model else "the object"
        return cls(
            object_name=name,
            wind_speed=session.wind.speed,
            wind_direction=session.wind.direction,
            visualization=session.visualization.mode,
        )

    @property
    def dynamic_pressure(self) -> float:
        """q = 1/2 * rho * v^2 in Pa."""
        return 0.5 * AIR_DENSITY * self.wind_speed ** 2


def primary_topic(mode: VisualizationMode) -> Topic:
    if mode is VisualizationMode.PRESSURE:
        return Topic.PRESSURE
    if mode is VisualizationMode.FORCES:
        return Topic.FORCES
    # Velocity vectors and streamlines both describe the flow
    return Topic.FLOW


def secondary_topics(mode: VisualizationMode) -> list[str]:
    primary = primary_topic(mode)
    return [title for topic, title in SECONDARY_TITLES.items() if topic is not primary]


def _focus_brief(request: AnalysisRequest) -> str:
    name = request.object_name
    mode = request.visualization

    if mode is VisualizationMode.PRESSURE:
        return (
            "The current visualization shows **Pressure Contours**. Your primary analysis should focus on this.\n"
            f"- **Pressure Zone Identification:** Identify the likely high-pressure (stagnation point) and "
            f"low-pressure zones on the \"{name}\" and explain why they form given its geometry and the airflow "
            "direction.\n"
            "- **Quantitative Pressure Analysis:** Give an estimated peak gauge pressure at the primary stagnation "
            f"point. It should be close to the theoretical dynamic pressure of "
            f"**{request.dynamic_pressure:.2f} Pa**. Also estimate the peak negative pressure in the low-pressure "
            "zones and explain how flow acceleration causes it.\n"
            "- **Pressure Gradients and Forces:** Explain how the pressure differences across the surface produce "
            f"pressure drag and lift or downforce on the \"{name}\"."
        )

    if mode is VisualizationMode.VELOCITY:
        return (
            "The current visualization shows **Velocity Vectors**. Your primary analysis should focus on this, "
            "giving a detailed breakdown of the fluid's motion.\n"
            "- **Flow Acceleration & Deceleration:** Point out where the airflow accelerates (e.g. over curved "
            "surfaces) and decelerates, and explain the principles behind it (e.g. the Venturi effect).\n"
            f"- **Boundary Layer Analysis:** Discuss the boundary layer on the surface of the \"{name}\" and "
            "whether it is likely laminar or turbulent, and why.\n"
            "- **Impact on the Object:** Connect acceleration to low-pressure areas (potential lift) and "
            "deceleration to high-pressure or separation points that add pressure drag."
        )

    if mode is VisualizationMode.FORCES:
        return (
            "The current visualization is for **Aerodynamic Forces**. Your primary analysis should focus on this.\n"
            f"- **Detailed Force Analysis:** Explain drag and lift as they apply to the \"{name}\": the main "
            "sources of drag (pressure drag from shape, skin friction from surface roughness) and which features "
            "might generate lift.\n"
            "- **Quantitative Coefficient Estimates:** Give a plausible estimate of the drag coefficient (Cd) and "
            f"lift coefficient (Cl) for the \"{name}\" under these conditions, written like \"Cd ≈ 0.5\" or "
            "\"Cl ≈ -0.1\". Justify them from the object's likely shape and orientation to the flow."
        )

    return (
        "The current visualization shows **Streamlines**. Your primary analysis should focus on this.\n"
        "- **Detailed Flow Pattern Analysis:** Describe the overall flow pattern shown by the streamlines. "
        "Explain flow attachment, separation points, and the formation and character of the wake behind the "
        f"\"{name}\"."
    )


def build_prompt(request: AnalysisRequest) -> str:
    """Full prompt text for one analysis request."""
    secondary = secondary_topics(request.visualization)
    secondary_block = ""
    if secondary:
        bullets = "\n".join(f"- {title}" for title in secondary)
        secondary_block = (
            "In a secondary section, please provide a **brief summary** of the following topics not covered "
            f"in the primary analysis:\n{bullets}\n"
        )

    return (
        "You are an expert in computational fluid dynamics (CFD) and aerodynamics.\n"
        f"A simulation was performed on a 3D model of a \"{request.object_name}\".\n"
        "The simulation parameters are:\n"
        f"- Wind Speed: {request.wind_speed:g} m/s\n"
        f"- Wind Direction: Airflow is coming from {request.wind_direction} degrees (where 0 is from the North).\n"
        "\n"
        f"{_focus_brief(request)}\n"
        "\n"
        f"{secondary_block}"
        "\n"
        "Please structure your response in markdown format. Keep the language accessible to students, "
        "researchers in biology, and enthusiasts, avoiding overly technical jargon where possible.\n"
    )
