"""Reversi engine: bitboard rules, alpha-beta search and difficulty tiers."""

__version__ = "0.1.0"
