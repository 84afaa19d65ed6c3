"""
Command-line interface for arkmod.
"""
