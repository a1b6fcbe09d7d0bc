"""Prior-authorization drafting assistant."""

__version__ = "0.1.0"
