"""
DIAC-V command-line tools.
"""
