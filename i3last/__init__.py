"""
i3last - Alt-tab style window history navigation for i3.

Run with:  python -m i3last
"""

__version__ = "0.1.0"
