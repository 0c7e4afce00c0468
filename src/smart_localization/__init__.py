"""
smart_localization: resource tables for localized games

Keeps every language table of a localization directory consistent with the
root table when keys are renamed, retyped, added or deleted.
"""

__version__ = "0.1.0"
__author__ = "smart_localization Contributors"

# Core service imports
from .reconciliation import LocalizationService, ReconciliationEngine, RootEditSession
from .utils.logging_config import setup_logging

# Main data models
from .tables import LocalizedObjectType, LocalizedValue, ResourceTable, LanguageStore
from .reconciliation.models import (
    KeyChange, ReconciliationPlan, ReconciliationReport, ReconciliationResult
)

__all__ = [
    # Services
    'LocalizationService',
    'ReconciliationEngine',
    'RootEditSession',

    # Logging
    'setup_logging',

    # Data models
    'LocalizedObjectType',
    'LocalizedValue',
    'ResourceTable',
    'LanguageStore',
    'KeyChange',
    'ReconciliationPlan',
    'ReconciliationReport',
    'ReconciliationResult',
]
