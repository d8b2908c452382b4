"""
Northstar Dev Testing Helper

Applies in-progress NorthstarMods / NorthstarLauncher pull-request builds
onto a local Titanfall 2 installation for manual testing.
"""

__version__ = "0.6.0"
