"""Export argument resolution for batch database exports."""

__version__ = "0.1.0"
