"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .settings import DashboardSettings

APP_LOGGER_NAME = "validator_dashboard"


@dataclass
class AppState:
    """Settings and logger shared by the service, the pipeline and the CLI.

    Passed explicitly instead of living in module globals, so tests can
    build one per case.
    """

    settings: DashboardSettings
    logger: logging.Logger

    @classmethod
    def from_settings(cls, settings: DashboardSettings) -> AppState:
        return cls(settings=settings, logger=logging.getLogger(APP_LOGGER_NAME))
