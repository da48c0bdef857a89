"""Adapters implementing the store gateway and unit-of-work ports."""
