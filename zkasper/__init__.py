"""Casper FFG building blocks: consensus state transitions, committee shuffling and attestation indices."""

__version__ = "1.0.0"