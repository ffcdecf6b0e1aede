"""
Generación de vehículos en los bordes de la intersección.

Este módulo implementa:
- VehicleSpawner: crea un vehículo en un origen si hay espacio libre
  junto al borde de entrada.
- TrafficGenerator: proceso de llegadas de Poisson que produce pedidos
  de aparición automáticos para simulaciones sin ventana.
"""

import logging
import random
import numpy as np
from typing import Dict, List, Optional

from .intersection import IntersectionGeometry, Origin
from .vehicle import Route, Vehicle
from src.utils.config import VehicleConfig

logger = logging.getLogger(__name__)


class VehicleSpawner:
    """
    Crea vehículos en el carril de entrada de cada origen.

    Un vehículo sólo aparece si ningún otro del mismo origen está a menos
    de (largo del vehículo + distancia de seguridad) del borde de entrada.
    """

    def __init__(self, geometry: IntersectionGeometry = None,
                 speed: int = VehicleConfig.SPEED,
                 safety_gap: int = VehicleConfig.SAFETY_GAP,
                 colors: Dict[str, tuple] = None,
                 seed: Optional[int] = None):
        """
        Inicializa el generador de vehículos.

        Args:
            geometry: Geometría de la intersección
            speed: Velocidad de los vehículos (píxeles por tick)
            safety_gap: Distancia de seguridad (píxeles)
            colors: Colores por nombre de origen (default: VehicleConfig.COLORS)
            seed: Semilla para rutas y orígenes aleatorios (opcional)

        Raises:
            ValueError: Si la velocidad no es positiva o falta un color
        """
        if speed <= 0:
            raise ValueError(f"Velocidad inválida: {speed}px/tick")

        self.geometry = geometry or IntersectionGeometry()
        self.speed = speed
        self.safety_gap = safety_gap
        self.colors = colors or VehicleConfig.COLORS

        missing = [o.value for o in Origin if o.value not in self.colors]
        if missing:
            raise ValueError(f"Faltan colores para los orígenes: {missing}")

        self.rng = random.Random(seed)

        # Estadísticas
        self.total_spawned = 0
        self.total_rejected = 0

    @property
    def clearance(self) -> int:
        """Distancia libre necesaria junto al borde de entrada."""
        return self.geometry.vehicle_height + self.safety_gap

    def can_spawn(self, origin: Origin, vehicles: List[Vehicle]) -> bool:
        """
        Verifica si hay espacio para un vehículo nuevo en el origen.

        Args:
            origin: Origen solicitado
            vehicles: Vehículos activos

        Returns:
            bool: False si algún vehículo del mismo origen está dentro de la
                  distancia de despeje del borde de entrada
        """
        for vehicle in vehicles:
            if vehicle.origin != origin:
                continue
            distance = self.geometry.distance_from_spawn_edge(vehicle.rect, origin)
            if distance < self.clearance:
                return False
        return True

    def spawn(self, origin: Origin, vehicles: List[Vehicle],
              tick: int = 0) -> Optional[Vehicle]:
        """
        Crea un vehículo en el origen y lo agrega a la lista de activos.

        Args:
            origin: Origen solicitado
            vehicles: Vehículos activos (se modifica si hay aparición)
            tick: Tick actual de la simulación

        Returns:
            Vehicle: Nuevo vehículo, o None si no hay espacio
        """
        if not self.can_spawn(origin, vehicles):
            self.total_rejected += 1
            logger.debug("Aparición rechazada en %s: sin espacio", origin.value)
            return None

        vehicle = Vehicle(
            rect=self.geometry.spawn_rect(origin),
            velocity=self.geometry.velocity(origin, self.speed),
            color=self.colors[origin.value],
            origin=origin,
            route=self.rng.choice(list(Route)),
            spawn_tick=tick
        )
        vehicles.append(vehicle)
        self.total_spawned += 1

        logger.debug("Aparece %s (ruta %s)", vehicle, vehicle.route.value)
        return vehicle

    def random_origin(self) -> Origin:
        """Origen elegido uniformemente al azar."""
        return self.rng.choice(list(Origin))

    def spawn_random(self, vehicles: List[Vehicle], tick: int = 0) -> Optional[Vehicle]:
        """Intenta crear un vehículo en un origen aleatorio."""
        return self.spawn(self.random_origin(), vehicles, tick)

    def reset(self):
        """Reinicia las estadísticas."""
        self.total_spawned = 0
        self.total_rejected = 0


class TrafficGenerator:
    """
    Genera pedidos de aparición según un proceso de Poisson.

    Los tiempos entre llegadas siguen una distribución exponencial, medida
    en ticks, y el origen de cada llegada se sortea según pesos por origen.
    """

    def __init__(self, arrivals_per_minute: float = 30.0,
                 ticks_per_second: int = 60,
                 origin_weights: Dict[Origin, float] = None,
                 seed: Optional[int] = None):
        """
        Inicializa el generador de tráfico.

        Args:
            arrivals_per_minute: Tasa total de llegadas (vehículos por minuto)
            ticks_per_second: Ticks de simulación por segundo
            origin_weights: Peso relativo de cada origen (default: uniforme)
            seed: Semilla para reproducibilidad (opcional)

        Raises:
            ValueError: Si la tasa o los pesos no son válidos
        """
        if arrivals_per_minute <= 0:
            raise ValueError(f"Tasa de llegadas inválida: {arrivals_per_minute} veh/min")
        if ticks_per_second <= 0:
            raise ValueError(f"Ticks por segundo inválidos: {ticks_per_second}")

        weights = origin_weights or {origin: 1.0 for origin in Origin}
        total = sum(weights.get(origin, 0.0) for origin in Origin)
        if total <= 0 or any(w < 0 for w in weights.values()):
            raise ValueError(f"Pesos por origen inválidos: {weights}")

        self.arrivals_per_minute = arrivals_per_minute
        self.lambda_per_tick = arrivals_per_minute / 60.0 / ticks_per_second
        self.origins = list(Origin)
        self.probabilities = np.array([weights.get(o, 0.0) for o in self.origins]) / total

        self.rng = np.random.default_rng(seed)
        self.next_arrival_tick = 0.0
        self.total_requests = 0

    def requests_for_tick(self, tick: int) -> List[Origin]:
        """
        Retorna los orígenes que piden un vehículo en este tick.

        Puede haber más de una llegada por tick si la tasa es alta.

        Args:
            tick: Tick actual de la simulación

        Returns:
            list: Orígenes solicitados (vacía si no hay llegadas)
        """
        requests = []
        while self.next_arrival_tick <= tick:
            index = self.rng.choice(len(self.origins), p=self.probabilities)
            requests.append(self.origins[index])
            # Tiempo entre llegadas ~ Exp(λ)
            self.next_arrival_tick += self.rng.exponential(1.0 / self.lambda_per_tick)

        self.total_requests += len(requests)
        return requests

    def reset(self, seed: Optional[int] = None):
        """Reinicia el generador (y opcionalmente su semilla)."""
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.next_arrival_tick = 0.0
        self.total_requests = 0
