"""Deep-link capture and delivery bridge between a host shell and its application layer."""

__version__ = "0.1.0"
