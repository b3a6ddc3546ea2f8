"""declscope - declaration metadata resolution engine."""

__version__ = "0.1.0"
