"""Configuration, logging, exceptions and time helpers."""
