"""Terminal rendering of run results."""

from pinbump.monitor.renderer import SummaryRenderer

__all__ = ["SummaryRenderer"]
