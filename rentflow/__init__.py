"""Rentflow: rental billing core (invoice lifecycle and payment matching)."""

__version__ = "1.0.0"
