# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: HTTP fetching, retries, pacing, logging, CLI tables

"""
Utils Layer: Shared infrastructure and cross-cutting concerns

This layer provides:
- The shared fetch client and its error hierarchy
- Retry and pacing policies for upstream requests
- Logging configuration and progress display
- Rich table helpers for the CLI

Data Flow: Supporting services for all other layers
"""

from . import logging

__all__ = [
    "logging",
]
