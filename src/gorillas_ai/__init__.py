"""Gorillas AI: artillery duels between regression-trained bots."""

__version__ = "0.1.0"
