"""
TV provider store with once-per-boot transient row retention.
"""

__version__ = "0.1.0"
