"""
Geometría de la intersección de cuatro vías.

Este módulo define los orígenes de los vehículos y todas las funciones
geométricas puras que usan el generador, el modelo de movimiento y el
controlador de semáforos: carriles, rectángulos de aparición, bordes de
avance, línea de detención y límites de la simulación.

Las coordenadas son de pantalla (pygame): el eje y crece hacia abajo.
Las posiciones a lo largo del eje de marcha se expresan como "progreso":
una coordenada con signo que siempre crece en el sentido de marcha del
vehículo, de modo que la comparación es la misma para los cuatro orígenes.
"""

from typing import Tuple
from enum import Enum
import pygame

from src.utils.config import WindowConfig, VehicleConfig, TrafficLightConfig


class Origin(Enum):
    """Borde por el que entra un vehículo."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def is_vertical(self) -> bool:
        """True si el vehículo circula sobre la calle vertical."""
        return self in (Origin.NORTH, Origin.SOUTH)

    @property
    def sign(self) -> int:
        """Signo del sentido de marcha sobre su eje (+1 hacia coordenadas mayores)."""
        return 1 if self in (Origin.NORTH, Origin.WEST) else -1

    @classmethod
    def from_name(cls, name: str) -> "Origin":
        """
        Obtiene un origen a partir de su nombre ("north", "South", ...).

        Raises:
            ValueError: Si el nombre no corresponde a ningún origen
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Origen desconocido: {name!r}") from None


class IntersectionGeometry:
    """
    Geometría de una intersección de dos calles perpendiculares.

    Cada calle tiene dos carriles: el de entrada (hacia el centro) y el
    de salida. Se circula por la derecha.
    """

    def __init__(self,
                 width: int = WindowConfig.WIDTH,
                 height: int = WindowConfig.HEIGHT,
                 road_width: int = WindowConfig.ROAD_WIDTH,
                 vehicle_width: int = VehicleConfig.WIDTH,
                 vehicle_height: int = VehicleConfig.HEIGHT,
                 light_size: int = TrafficLightConfig.SIZE):
        """
        Inicializa la geometría.

        Args:
            width: Ancho del área simulada (píxeles)
            height: Alto del área simulada (píxeles)
            road_width: Ancho de cada calle (dos carriles)
            vehicle_width: Ancho del vehículo, perpendicular a la marcha
            vehicle_height: Largo del vehículo, a lo largo de la marcha
            light_size: Lado del cuadrado de cada semáforo

        Raises:
            ValueError: Si alguna dimensión no es positiva o el vehículo
                        no entra en su carril
        """
        for name, value in (("width", width), ("height", height),
                            ("road_width", road_width),
                            ("vehicle_width", vehicle_width),
                            ("vehicle_height", vehicle_height),
                            ("light_size", light_size)):
            if value <= 0:
                raise ValueError(f"Dimensión inválida: {name}={value}")
        if vehicle_width > road_width // 2:
            raise ValueError(f"Vehículo de {vehicle_width}px no entra en un carril "
                             f"de {road_width // 2}px")

        self.width = width
        self.height = height
        self.road_width = road_width
        self.lane_width = road_width // 2
        self.vehicle_width = vehicle_width
        self.vehicle_height = vehicle_height
        self.light_size = light_size

        self.center_x = width // 2
        self.center_y = height // 2

        self.bounds = pygame.Rect(0, 0, width, height)

    # ------------------------------------------------------------------
    # Carriles
    # ------------------------------------------------------------------

    def _center_for(self, origin: Origin) -> int:
        """Coordenada del eje central de la calle, en el eje transversal."""
        return self.center_x if origin.is_vertical else self.center_y

    def lane_offset(self, origin: Origin, outbound: bool) -> int:
        """
        Coordenada transversal (x o y de la esquina superior izquierda)
        del carril que ocupa un vehículo.

        Función pura de (origen, outbound): el carril de salida es el
        reflejo del de entrada respecto al eje de la calle.

        Args:
            origin: Origen del vehículo
            outbound: True si el vehículo ya cruzó el centro

        Returns:
            int: Coordenada x (calle vertical) o y (calle horizontal)
        """
        center = self._center_for(origin)
        half_lane = self.lane_width // 2
        half_vehicle = self.vehicle_width // 2

        # Circulación por la derecha: hacia el sur se usa el carril oeste,
        # hacia el este el carril sur, etc.
        if origin in (Origin.NORTH, Origin.EAST):
            inbound = center - half_lane - half_vehicle
        else:
            inbound = center + half_lane - half_vehicle

        if not outbound:
            return inbound
        return 2 * center - inbound - self.vehicle_width

    def set_lane(self, rect: pygame.Rect, origin: Origin, outbound: bool):
        """Reubica un rectángulo (in-place) en el carril correspondiente."""
        offset = self.lane_offset(origin, outbound)
        if origin.is_vertical:
            rect.x = offset
        else:
            rect.y = offset

    # ------------------------------------------------------------------
    # Aparición
    # ------------------------------------------------------------------

    def spawn_rect(self, origin: Origin) -> pygame.Rect:
        """
        Rectángulo de un vehículo recién aparecido, apoyado en el borde
        de entrada y en su carril de entrada.
        """
        offset = self.lane_offset(origin, outbound=False)
        w, h = self.vehicle_width, self.vehicle_height

        if origin == Origin.NORTH:
            return pygame.Rect(offset, 0, w, h)
        elif origin == Origin.SOUTH:
            return pygame.Rect(offset, self.height - h, w, h)
        elif origin == Origin.WEST:
            return pygame.Rect(0, offset, h, w)
        else:
            return pygame.Rect(self.width - h, offset, h, w)

    @staticmethod
    def velocity(origin: Origin, speed: int) -> Tuple[int, int]:
        """Vector velocidad de un solo eje, hacia la intersección."""
        if origin.is_vertical:
            return (0, origin.sign * speed)
        return (origin.sign * speed, 0)

    def spawn_edge_progress(self, origin: Origin) -> int:
        """Progreso del borde de entrada para el origen dado."""
        if origin == Origin.NORTH or origin == Origin.WEST:
            return 0
        if origin == Origin.SOUTH:
            return -self.height
        return -self.width

    def distance_from_spawn_edge(self, rect: pygame.Rect, origin: Origin) -> int:
        """Distancia entre el borde de entrada y la parte trasera del vehículo."""
        return self.trailing_progress(rect, origin) - self.spawn_edge_progress(origin)

    # ------------------------------------------------------------------
    # Progreso a lo largo del eje de marcha
    # ------------------------------------------------------------------

    @staticmethod
    def leading_progress(rect: pygame.Rect, origin: Origin) -> int:
        """Progreso del borde delantero del vehículo."""
        if origin == Origin.NORTH:
            return rect.bottom
        elif origin == Origin.SOUTH:
            return -rect.top
        elif origin == Origin.WEST:
            return rect.right
        return -rect.left

    @staticmethod
    def trailing_progress(rect: pygame.Rect, origin: Origin) -> int:
        """Progreso del borde trasero del vehículo."""
        if origin == Origin.NORTH:
            return rect.top
        elif origin == Origin.SOUTH:
            return -rect.bottom
        elif origin == Origin.WEST:
            return rect.left
        return -rect.right

    def center_progress(self, origin: Origin) -> int:
        """Progreso del centro de la intersección."""
        return origin.sign * self._along_center(origin)

    def stop_line_progress(self, origin: Origin) -> int:
        """Progreso de la línea de detención (borde de la intersección)."""
        return origin.sign * self._along_center(origin) - self.road_width // 2

    def _along_center(self, origin: Origin) -> int:
        return self.center_y if origin.is_vertical else self.center_x

    # ------------------------------------------------------------------
    # Límites y semáforos
    # ------------------------------------------------------------------

    def is_outside(self, rect: pygame.Rect) -> bool:
        """True si el rectángulo quedó completamente fuera del área simulada."""
        return not self.bounds.colliderect(rect)

    def light_rect(self, origin: Origin) -> pygame.Rect:
        """
        Posición del semáforo que regula un origen: en la esquina de la
        intersección del lado de aproximación, a la derecha del conductor.
        """
        s = self.light_size
        left = self.center_x - self.road_width // 2 - s
        right = self.center_x + self.road_width // 2
        top = self.center_y - self.road_width // 2 - s
        bottom = self.center_y + self.road_width // 2

        corners = {
            Origin.NORTH: (left, top),
            Origin.SOUTH: (right, bottom),
            Origin.WEST: (left, bottom),
            Origin.EAST: (right, top),
        }
        x, y = corners[origin]
        return pygame.Rect(x, y, s, s)

    def approach_length(self, origin: Origin) -> int:
        """Largo del carril de aproximación: del borde a la línea de detención."""
        return self.stop_line_progress(origin) - self.spawn_edge_progress(origin)

    def __repr__(self) -> str:
        return (f"IntersectionGeometry({self.width}x{self.height}, "
                f"road={self.road_width}px, "
                f"vehicle={self.vehicle_width}x{self.vehicle_height}px)")
