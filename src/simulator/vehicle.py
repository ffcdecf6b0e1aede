"""
Modelo de vehículo de la intersección.

Este módulo define el vehículo individual: su rectángulo, su vector
velocidad, su origen (fijo desde la creación) y los indicadores de
detención y de salida que actualiza el modelo de movimiento en cada tick.
"""

from typing import NamedTuple, Tuple
from enum import Enum
import pygame

from .intersection import Origin


class Route(Enum):
    """
    Intención de giro elegida al aparecer.

    Reservada: se registra en el vehículo pero no influye en el
    movimiento ni en el dibujo.
    """
    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"


class VehicleSnapshot(NamedTuple):
    """Copia inmutable del estado de un vehículo al inicio de un tick."""
    index: int
    rect: pygame.Rect
    origin: Origin
    outbound: bool


class Vehicle:
    """
    Representa un vehículo individual en la simulación.

    El vehículo avanza sobre un solo eje a velocidad constante, se detiene
    ante un semáforo en rojo o un vehículo demasiado cerca adelante, y
    acumula estadísticas de su paso por la intersección.
    """

    # Contador global para IDs únicos
    _next_id = 1

    def __init__(self, rect: pygame.Rect, velocity: Tuple[int, int],
                 color: Tuple[int, int, int], origin: Origin,
                 route: Route = Route.STRAIGHT, spawn_tick: int = 0):
        """
        Inicializa un vehículo.

        Args:
            rect: Rectángulo de posición (se copia)
            velocity: Desplazamiento por tick (dx, dy)
            color: Color RGB asociado al origen
            origin: Borde por el que entra
            route: Intención de giro (informativa)
            spawn_tick: Tick de la simulación en que apareció
        """
        # Identificación
        self.id = Vehicle._next_id
        Vehicle._next_id += 1

        self.rect = pygame.Rect(rect)
        self.velocity = velocity
        self.color = color
        self._origin = origin
        self.route = route

        # Estado
        self.stopped = False
        self.outbound = False

        # Estadísticas
        self.spawn_tick = spawn_tick
        self.ticks_stopped = 0
        self.num_stops = 0

    @property
    def origin(self) -> Origin:
        """Origen del vehículo; no cambia después de la creación."""
        return self._origin

    def snapshot(self, index: int) -> VehicleSnapshot:
        """Copia del estado relevante para las comparaciones entre vehículos."""
        return VehicleSnapshot(index, self.rect.copy(), self._origin, self.outbound)

    def advance(self):
        """Suma el vector velocidad a la posición."""
        self.rect.move_ip(self.velocity)

    def set_stopped(self, stopped: bool):
        """
        Actualiza el indicador de detención y las estadísticas.

        Args:
            stopped: True si el vehículo queda detenido este tick
        """
        if stopped:
            self.ticks_stopped += 1
            if not self.stopped:
                self.num_stops += 1
        self.stopped = stopped

    def get_statistics(self) -> dict:
        """
        Retorna un diccionario con las estadísticas del vehículo.

        Returns:
            dict: Estadísticas completas
        """
        return {
            'vehicle_id': self.id,
            'origin': self._origin.value,
            'route': self.route.value,
            'spawn_tick': self.spawn_tick,
            'ticks_stopped': self.ticks_stopped,
            'num_stops': self.num_stops,
            'outbound': self.outbound,
        }

    def get_status_string(self) -> str:
        """Retorna una representación legible del estado actual."""
        state = "DETENIDO" if self.stopped else "EN MARCHA"
        leg = "saliendo" if self.outbound else "entrando"
        return (f"Vehículo #{self.id} | Origen: {self._origin.value} | "
                f"Estado: {state} ({leg}) | "
                f"Posición: ({self.rect.x}, {self.rect.y}) | "
                f"Paradas: {self.num_stops}")

    def __str__(self) -> str:
        return f"Vehicle(#{self.id}, {self._origin.value})"

    def __repr__(self) -> str:
        return (f"Vehicle(id={self.id}, origin={self._origin.value}, "
                f"rect={tuple(self.rect)}, velocity={self.velocity}, "
                f"stopped={self.stopped}, outbound={self.outbound})")
