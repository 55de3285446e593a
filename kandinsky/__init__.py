"""
Kandinsky - interactive generative composition engine
"""

from .config import CompositionConfig
from .sketch import KandinskySketch

__all__ = ['CompositionConfig', 'KandinskySketch']
__version__ = '1.0.0'
