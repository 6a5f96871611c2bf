"""Aggregator integrations."""
