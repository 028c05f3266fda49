"""Linearizability checking, value encoding and MapReduce tools."""

__version__ = "0.1.0"