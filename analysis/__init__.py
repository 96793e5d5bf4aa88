"""
Analysis Module

Figures for the model selection report

Modules:
- reports: Tuning curves, confusion heatmaps, feature ranking charts
"""

__version__ = "1.0.0"
