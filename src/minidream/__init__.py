"""mini-DREAM — cell motility scoring and challenge submission toolkit."""

__version__ = "0.1.0"
