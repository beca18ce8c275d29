"""Arcade drawing for Gorillas AI."""
