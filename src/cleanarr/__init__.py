"""Cleanarr - retention suggestions for Radarr/Sonarr media libraries."""

__version__ = "0.1.0"
