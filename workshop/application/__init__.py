from .workshop_engine import WorkshopEngine

__all__ = ["WorkshopEngine"]
