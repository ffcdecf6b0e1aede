"""
Captura estática del estado de la intersección con matplotlib.

Útil para simulaciones sin ventana: dibuja un cuadro de RenderState como
figura de matplotlib y permite guardarlo como imagen.
"""

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.patches as patches

from src.simulator.intersection import IntersectionGeometry
from src.simulator.traffic_simulator import RenderState
from src.utils.config import RESULTS_DIR, VisualizationConfig, ensure_directories


def _rgb(color: tuple) -> tuple:
    """Convierte un color RGB 0-255 a 0-1."""
    return tuple(c / 255 for c in color)


def render_snapshot(state: RenderState, geometry: IntersectionGeometry = None,
                    title: Optional[str] = None) -> plt.Figure:
    """
    Crea una figura con calles, semáforos y vehículos.

    Args:
        state: Estado a dibujar
        geometry: Geometría de la intersección
        title: Título de la figura (default: tick y fase)

    Returns:
        plt.Figure: Figura de matplotlib
    """
    g = geometry or IntersectionGeometry()
    half = g.road_width // 2

    fig, ax = plt.subplots(figsize=VisualizationConfig.FIGURE_SIZE)
    ax.set_xlim(0, g.width)
    ax.set_ylim(g.height, 0)  # coordenadas de pantalla: y hacia abajo
    ax.set_aspect('equal')
    ax.axis('off')
    ax.set_facecolor(_rgb(VisualizationConfig.BACKGROUND_COLOR))
    fig.patch.set_facecolor(_rgb(VisualizationConfig.BACKGROUND_COLOR))

    road = _rgb(VisualizationConfig.ROAD_COLOR)
    ax.add_patch(patches.Rectangle((g.center_x - half, 0), g.road_width, g.height, color=road))
    ax.add_patch(patches.Rectangle((0, g.center_y - half), g.width, g.road_width, color=road))

    for rect, light_state in state.lights:
        color = _rgb(VisualizationConfig.LIGHT_COLORS[light_state.value])
        ax.add_patch(patches.Rectangle((rect.x, rect.y), rect.width, rect.height,
                                       facecolor=color, edgecolor='black'))

    for rect, color in state.vehicles:
        ax.add_patch(patches.Rectangle((rect.x, rect.y), rect.width, rect.height,
                                       facecolor=_rgb(color), edgecolor='black', linewidth=0.5))

    if title is None:
        title = f"Tick {state.tick} | Fase: {state.phase.value} | Vehículos: {len(state.vehicles)}"
    ax.set_title(title, fontsize=12, fontweight='bold')

    plt.tight_layout()
    return fig


def save_snapshot(fig: plt.Figure, filename: str, directory: Path = None) -> Path:
    """
    Guarda una figura como imagen.

    Args:
        fig: Figura a guardar
        filename: Nombre del archivo (sin extensión)
        directory: Directorio destino (default: RESULTS_DIR)

    Returns:
        Path: Ruta del archivo escrito
    """
    if directory is None:
        ensure_directories()
        directory = RESULTS_DIR
    else:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"{filename}.{VisualizationConfig.SAVE_FORMAT}"
    fig.savefig(path, dpi=VisualizationConfig.DPI)
    plt.close(fig)
    return path
