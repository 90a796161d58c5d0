"""Reports, contribution heatmaps and work-rhythm rendering for recorded git activity."""

__version__ = "0.1.0"
__all__ = ["heatmap", "models", "output", "rhythm_report", "style"]