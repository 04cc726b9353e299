"""Checklist runbook manager: reusable runbooks and live incident executions."""

__version__ = "1.0.0"
