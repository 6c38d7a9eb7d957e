"""Radar Alerts - alert rule evaluation for AI brand monitoring.

This package decides when brand-monitoring alerts fire:
- Condition evaluation and severity classification for alert rules
- Rule runs over metric snapshots supplied by a metrics provider
- Critical hallucination sweeps with at-most-once alerts and notifications
- Notification dispatch to console, webhook and email channels
"""

__version__ = "0.1.0"
