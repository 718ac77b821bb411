"""Health-check driven node tainting for Kubernetes clusters."""

__version__ = "0.1.0"
