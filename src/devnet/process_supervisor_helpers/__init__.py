"""Helpers for the process supervisor."""

from .pid_validator import PidValidator
from .process_terminator import terminate_process

__all__ = ["PidValidator", "terminate_process"]
