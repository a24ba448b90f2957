"""
doorlink: stable door ids, link validation and rename propagation for
document-based level projects.
"""

__version__ = "0.1.0"
