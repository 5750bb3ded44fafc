"""
Core module for Vinylogue.
Contains configuration, exceptions, logging setup, and validation.
"""

from .config import *
from .exceptions import *
from .logger import setup_logging, CredentialRedactingFilter
from .validation import validate_configuration, validate_and_raise, check_dependencies

__all__ = [
    'setup_logging',
    'CredentialRedactingFilter',
    'validate_configuration',
    'validate_and_raise',
    'check_dependencies',
    'VinylogueError',
    'InvalidInputError',
    'NotFoundError',
    'AuthFailure',
    'UpstreamError',
    'RenderError',
    'ConfigurationError',
]
