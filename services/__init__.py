# services/__init__.py
"""
Services package for the disaster report application
"""

from .urgency import get_urgency_level
from .report_store import ReportStore
from .prediction_client import PredictionClient
from .user_directory import UserDirectory

__all__ = ['get_urgency_level', 'ReportStore', 'PredictionClient', 'UserDirectory']
