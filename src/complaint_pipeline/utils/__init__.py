"""
Utility modules for the complaint pipeline
"""

from .error_handler import (
    CardinalityWarning,
    ErrorHandler,
    PipelineError,
    ResolutionError,
    SchemaError,
)
from .validation import InputValidator, ValidationError

__all__ = [
    # Error handling
    'ErrorHandler',
    'PipelineError',
    'SchemaError',
    'ResolutionError',
    'CardinalityWarning',

    # Validation
    'InputValidator',
    'ValidationError',
]
