"""
Core Module.

Configuration, logging and exceptions shared by the shell.
"""
