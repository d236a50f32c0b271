"""Periodic host health monitoring pipeline.

Samples host metrics, classifies them against thresholds, aggregates a
cycle snapshot, analyzes it into issues and recommendations, and schedules
the next check-in based on overall severity.
"""

__version__ = "0.1.0"
