"""
Rate limiting package for the submission service.

Holds the rolling-window gate that caps how many registry submissions may
start per configured time unit.
"""

from .gate import RateGate, ReleaseScheduler

__all__ = ["RateGate", "ReleaseScheduler"]
