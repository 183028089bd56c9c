"""Background workers for invoicing service"""
from .overdue_marker import OverdueMarkerWorker

__all__ = ["OverdueMarkerWorker"]
