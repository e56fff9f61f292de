"""Terminal editor for beancount transactions."""

__version__ = "0.1.0"
