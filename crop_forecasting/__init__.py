"""
Smart Crop Forecasting - Rule-Based Crop Planning Dashboard
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Smart Crop Forecasting Team"

# Core modules
from . import config
from . import schema
from . import recommend
from . import ingest
from . import orchestrator

__all__ = [
    # Core
    'config', 'schema', 'recommend', 'ingest', 'orchestrator',
]
