"""Generators that turn compiled declarations into files."""
