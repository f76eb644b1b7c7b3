"""
Scanning and analysis tools for tagsearch.

This package contains the file walker, the tag extractors and scanner, and
the filter, similarity and tree components built on them.
"""
