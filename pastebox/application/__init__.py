"""
Application Layer

Services that orchestrate the domain for the HTTP surface and the
background expiration sweeper.
"""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .event_publisher import EventPublisher
from .expiration_sweeper import ExpirationSweeper, SweeperState, SweepResult
from .paste_service import PasteService, UploadResult

__all__ = [
    "DependencyContainer",
    "DependencyNotFoundError",
    "EventPublisher",
    "ExpirationSweeper",
    "SweeperState",
    "SweepResult",
    "PasteService",
    "UploadResult",
]
