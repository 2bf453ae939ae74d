"""Live catalog references embedded in rich-text documents."""

__version__ = "1.0.0"
