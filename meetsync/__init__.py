"""Meeting recordings: merge, group and cache recordings from the meetings API."""

__version__ = "0.1.0"
