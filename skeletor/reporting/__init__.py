"""Reporting — the abstract event sink and its console implementation."""

from skeletor.reporting.reporter import RecordingReporter, Reporter, SilentReporter

__all__ = ["Reporter", "SilentReporter", "RecordingReporter"]
