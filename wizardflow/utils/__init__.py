"""Utility modules for wizardflow."""
