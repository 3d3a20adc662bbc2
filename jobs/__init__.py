"""Scheduled jobs."""

from .balance_monitor import BalanceMonitor, MonitorState

__all__ = ["BalanceMonitor", "MonitorState"]
