"""Climatiseur process surfaces: command line and HTTP."""
