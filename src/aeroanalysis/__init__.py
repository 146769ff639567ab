"""Aero Analysis Studio: simulated wind-tunnel runs with AI-generated reports."""
