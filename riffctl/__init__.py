"""Command line client that checks, completes and documents a Kubernetes workload platform."""

__version__ = "0.1.0"
__all__ = ["__version__"]