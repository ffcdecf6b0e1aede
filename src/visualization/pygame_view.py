"""
Ventana interactiva de la simulación con pygame.
"""

from typing import List

import pygame

from src.simulator.intersection import IntersectionGeometry
from src.simulator.simulation_loop import Key
from src.simulator.traffic_simulator import RenderState
from src.utils.config import VisualizationConfig, WindowConfig

PYGAME_KEYS = {
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_r: Key.R,
    pygame.K_ESCAPE: Key.ESCAPE,
}


class PygameInput:
    """Traduce los eventos de pygame a teclas de la simulación."""

    def poll(self) -> List[Key]:
        keys = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                keys.append(Key.WINDOW_CLOSE)
            elif event.type == pygame.KEYDOWN and event.key in PYGAME_KEYS:
                keys.append(PYGAME_KEYS[event.key])
        return keys


class PygameRenderer:
    """
    Dibuja calles, semáforos y vehículos sobre una superficie de pygame.

    Sin superficie explícita abre la ventana de la simulación y presenta
    cada cuadro; con una superficie (por ejemplo fuera de pantalla) sólo
    dibuja sobre ella.
    """

    def __init__(self, surface: pygame.Surface = None,
                 geometry: IntersectionGeometry = None,
                 fps: int = WindowConfig.FPS):
        """
        Args:
            surface: Superficie destino (default: nueva ventana)
            geometry: Geometría de la intersección
            fps: Cuadros por segundo para pause()

        Raises:
            pygame.error: Si no se puede abrir la ventana
        """
        self.geometry = geometry or IntersectionGeometry()
        self.fps = fps
        self._owns_display = surface is None

        if self._owns_display:
            pygame.init()
            surface = pygame.display.set_mode((self.geometry.width, self.geometry.height))
            pygame.display.set_caption(WindowConfig.TITLE)

        self.surface = surface
        self.clock = pygame.time.Clock()

    def draw_roads(self):
        """Fondo, calles y líneas divisorias de carril."""
        g = self.geometry
        half = g.road_width // 2

        self.surface.fill(VisualizationConfig.BACKGROUND_COLOR)
        pygame.draw.rect(self.surface, VisualizationConfig.ROAD_COLOR,
                         pygame.Rect(g.center_x - half, 0, g.road_width, g.height))
        pygame.draw.rect(self.surface, VisualizationConfig.ROAD_COLOR,
                         pygame.Rect(0, g.center_y - half, g.width, g.road_width))

        # Líneas centrales fuera del cruce
        color = VisualizationConfig.LANE_LINE_COLOR
        pygame.draw.line(self.surface, color, (g.center_x, 0), (g.center_x, g.center_y - half))
        pygame.draw.line(self.surface, color, (g.center_x, g.center_y + half), (g.center_x, g.height))
        pygame.draw.line(self.surface, color, (0, g.center_y), (g.center_x - half, g.center_y))
        pygame.draw.line(self.surface, color, (g.center_x + half, g.center_y), (g.width, g.center_y))

    def draw(self, state: RenderState):
        """Dibuja un cuadro completo y, si la ventana es propia, lo presenta."""
        self.draw_roads()

        for rect, light_state in state.lights:
            color = VisualizationConfig.LIGHT_COLORS[light_state.value]
            pygame.draw.rect(self.surface, color, rect)

        for rect, color in state.vehicles:
            pygame.draw.rect(self.surface, color, rect)

        if self._owns_display:
            pygame.display.flip()

    def pause(self):
        """Pausa de fin de cuadro para mantener la frecuencia fija."""
        self.clock.tick(self.fps)

    def close(self):
        if self._owns_display:
            pygame.quit()
