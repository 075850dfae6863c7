"""Disk, memory and console helpers for mac-cleanup."""
