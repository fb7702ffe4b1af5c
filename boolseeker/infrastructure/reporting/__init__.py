"""
Report rendering for the console.
"""

from .console_report import render_report

__all__ = ['render_report']
