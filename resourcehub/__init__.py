"""
ResourceHub: a file-sharing backend with tag-based resource discovery.
"""

__version__ = "1.0.0"
