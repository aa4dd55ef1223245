"""
Text exports of the catalog.
"""

from .llms import build_llms_txt, render_llms_txt

__all__ = ["build_llms_txt", "render_llms_txt"]
