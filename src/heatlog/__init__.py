"""heatlog - annotate log lines by the percentile rank of a numeric field."""

from heatlog.__version__ import __version__


__all__ = ['__version__']
