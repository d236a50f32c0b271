"""Metrics-to-verdict pipeline.

Stages, leaves first:
- classifier.py: raw sample -> MetricReport (OK/WARN/CRIT/UNKNOWN)
- aggregator.py: concurrent collection, reports -> CycleSnapshot
- analyzer.py: CycleSnapshot -> Analysis (issues, recommendations, next check-in)
- notifier.py: Analysis -> notification
- workflow.py: one full cycle
- scheduler.py: adaptive re-check loop

Import from the submodules directly; this package keeps no re-exports so
that configuration can depend on ``pipeline.types`` without import cycles.
"""
