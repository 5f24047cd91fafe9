"""TCP echo, annotated-echo and greeting servers with matching clients."""

__version__ = "0.1.0"
__all__ = ["servers", "clients"]