"""Monitoring & Alerts: status reports, notifiers, metrics, kill-switch."""

from lp_hedge.monitoring.metrics import MetricsCollector
from lp_hedge.monitoring.kill_switch import KillSwitch
from lp_hedge.monitoring.report import ReportFormatter, format_report

__all__ = ["MetricsCollector", "KillSwitch", "ReportFormatter", "format_report"]
