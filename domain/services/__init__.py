"""
Domain services containing pure business logic.
"""

from domain.services.map_selection_service import MapSelectionService

__all__ = ["MapSelectionService"]
