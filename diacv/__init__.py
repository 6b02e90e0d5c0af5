"""
DIAC-V
Pump engineering calculations: curve interpolation, duty normalization
and Darcy-Weisbach pipe losses.
"""

__version__ = "1.0.0"
