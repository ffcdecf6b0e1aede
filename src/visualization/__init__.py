"""
Dibujo de la intersección.

Este módulo contiene los destinos de dibujo de la simulación:
- Ventana interactiva con pygame (y su origen de teclas)
- Captura estática con matplotlib
"""

from .pygame_view import PygameInput, PygameRenderer
from .snapshot import render_snapshot, save_snapshot

__all__ = [
    'PygameInput',
    'PygameRenderer',
    'render_snapshot',
    'save_snapshot'
]
