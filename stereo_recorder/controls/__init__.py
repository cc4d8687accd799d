"""
Input controls module.
"""
from .keyboard import KeyboardControl, HELP_TEXT

__all__ = ['KeyboardControl', 'HELP_TEXT']
