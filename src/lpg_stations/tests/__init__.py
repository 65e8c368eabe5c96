"""Tests for the lpg_stations app."""
