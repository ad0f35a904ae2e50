"""
Services layer for the tutor backend
"""

from .progress_engine import ProgressEngine
from .usage_tracking_service import UsageTrackingService
from .navigation import build_navigation
