"""Employee work-log payroll service."""

__version__ = "0.1.0"
