"""Logging, output and file-writing helpers."""
