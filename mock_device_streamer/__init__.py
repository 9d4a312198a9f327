"""Simulated camera device speaking the receiver's wire protocol."""
