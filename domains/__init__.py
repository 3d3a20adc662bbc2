"""Domain modules for the AEZA balance bot."""
