"""Core definitions shared across clickonce-fetch."""
