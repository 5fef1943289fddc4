"""Utility modules for the Advanced Security overview."""

from .parallel import ParallelProcessor
from .secure_logging import SensitiveDataFilter, setup_secure_logging

__all__ = ["ParallelProcessor", "SensitiveDataFilter", "setup_secure_logging"]
