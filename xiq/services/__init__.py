"""
Services module.

Contains the request orchestration service.
"""

from xiq.services.orchestrator import RequestOrchestrator

__all__ = ["RequestOrchestrator"]
