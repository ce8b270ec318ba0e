"""walked: a modal, keyboard-driven terminal file browser."""

__version__ = "0.3.0"
