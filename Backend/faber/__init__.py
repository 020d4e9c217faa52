# faber/__init__.py
"""
Faber Studio - prompt to previewed React UI.
"""
__version__ = "0.3.0"
