"""
Semáforos y controlador de fases de la intersección.

Este módulo implementa los cuatro semáforos (uno por origen) y el
controlador que alterna entre las fases Norte-Sur y Este-Oeste. Cada fase
dura al menos un tiempo base; al cumplirse, el controlador extiende el
verde mientras alguna cola del par en verde supere la mitad de la
capacidad del carril.
"""

from typing import Callable, Dict, Iterable, List
from enum import Enum
import logging
import time

import pygame

from .intersection import IntersectionGeometry, Origin
from src.utils.config import TrafficLightConfig, VehicleConfig

logger = logging.getLogger(__name__)


class LightState(Enum):
    """Estados posibles de un semáforo."""
    RED = "red"
    GREEN = "green"


class Phase(Enum):
    """Par de direcciones con luz verde."""
    NORTH_SOUTH = "north_south"
    EAST_WEST = "east_west"

    @property
    def origins(self) -> tuple:
        """Orígenes con verde durante esta fase."""
        if self == Phase.NORTH_SOUTH:
            return (Origin.NORTH, Origin.SOUTH)
        return (Origin.EAST, Origin.WEST)

    def opposite(self) -> "Phase":
        """La otra fase."""
        return Phase.EAST_WEST if self == Phase.NORTH_SOUTH else Phase.NORTH_SOUTH


class TrafficLight:
    """Semáforo de un origen: posición fija y estado rojo/verde."""

    def __init__(self, origin: Origin, rect: pygame.Rect,
                 state: LightState = LightState.RED):
        self.origin = origin
        self.rect = pygame.Rect(rect)
        self.state = state

    def is_green(self) -> bool:
        return self.state == LightState.GREEN

    def __repr__(self) -> str:
        return f"TrafficLight({self.origin.value}, {self.state.value})"


class LightController:
    """
    Máquina de estados de las fases de la intersección.

    Mantiene los cuatro semáforos sincronizados con la fase activa:
    exactamente los dos semáforos de la fase están en verde y los otros
    dos en rojo.

    La extensión por congestión no tiene tope: mientras la cola del par
    en verde siga superando el umbral, el par en rojo sigue esperando.
    """

    def __init__(self,
                 geometry: IntersectionGeometry = None,
                 base_duration: float = TrafficLightConfig.BASE_PHASE_DURATION,
                 safety_gap: int = VehicleConfig.SAFETY_GAP,
                 lane_length: int = None,
                 clock: Callable[[], float] = time.monotonic,
                 initial_phase: Phase = Phase.NORTH_SOUTH):
        """
        Inicializa el controlador.

        Args:
            geometry: Geometría de la intersección (default: configuración global)
            base_duration: Duración mínima de cada fase en segundos
            safety_gap: Distancia de seguridad entre vehículos (píxeles)
            lane_length: Largo del carril usado para la capacidad
                         (default: largo de aproximación de la geometría)
            clock: Fuente de tiempo en segundos
            initial_phase: Fase inicial

        Raises:
            ValueError: Si la duración base o los parámetros de capacidad
                        no son positivos
        """
        self.geometry = geometry or IntersectionGeometry()

        if base_duration <= 0:
            raise ValueError(f"Duración base inválida: {base_duration}s")
        if safety_gap < 0:
            raise ValueError(f"Distancia de seguridad inválida: {safety_gap}px")

        self.base_duration = base_duration
        self.safety_gap = safety_gap
        self.lane_length = (lane_length if lane_length is not None
                            else self.geometry.approach_length(Origin.NORTH))
        if self.lane_length <= 0:
            raise ValueError(f"Largo de carril inválido: {self.lane_length}px")

        self.clock = clock
        self._initial_phase = initial_phase

        self.lights: Dict[Origin, TrafficLight] = {
            origin: TrafficLight(origin, self.geometry.light_rect(origin))
            for origin in Origin
        }

        # Estado
        self.phase = initial_phase
        self.phase_start = self.clock()
        self._apply_phase()

        # Estadísticas
        self.phase_change_history: List[dict] = []
        self.extension_checks = 0

    def _apply_phase(self):
        """Pone en verde los semáforos de la fase activa y en rojo el resto."""
        green = self.phase.origins
        for origin, light in self.lights.items():
            light.state = LightState.GREEN if origin in green else LightState.RED

    def lane_capacity(self) -> int:
        """
        Cantidad máxima de vehículos que entran en un carril.

        Se mide sobre el largo del carril de aproximación (borde a línea de
        detención, 350 px por defecto), no sobre su ancho: 350 // (40 + 20) = 5,
        así que la fase se extiende con colas de 3 o más (> 5 / 2).
        """
        return self.lane_length // (self.geometry.vehicle_height + self.safety_gap)

    def elapsed(self) -> float:
        """Segundos transcurridos desde el inicio de la fase activa."""
        return self.clock() - self.phase_start

    @staticmethod
    def queue_lengths(vehicles: Iterable) -> Dict[Origin, int]:
        """
        Cuenta los vehículos detenidos de cada origen.

        Args:
            vehicles: Vehículos activos

        Returns:
            dict: {Origin: cantidad de vehículos detenidos}
        """
        queues = {origin: 0 for origin in Origin}
        for vehicle in vehicles:
            if vehicle.stopped:
                queues[vehicle.origin] += 1
        return queues

    def update(self, vehicles: Iterable) -> bool:
        """
        Evalúa el cambio de fase.

        Si la fase activa ya cumplió la duración base y ninguna cola del
        par en verde supera la mitad de la capacidad del carril, cambia de
        fase y reinicia el temporizador. Si alguna la supera, extiende la
        fase sin reiniciar el temporizador, por lo que la evaluación se
        repite en cada tick siguiente.

        Args:
            vehicles: Vehículos activos

        Returns:
            bool: True si hubo cambio de fase en este tick
        """
        if self.elapsed() < self.base_duration:
            return False

        queues = self.queue_lengths(vehicles)
        threshold = self.lane_capacity() / 2
        congested = [origin for origin in self.phase.origins if queues[origin] > threshold]

        if congested:
            self.extension_checks += 1
            logger.debug("Fase %s extendida: colas %s superan %.1f vehículos",
                         self.phase.value,
                         {o.value: queues[o] for o in congested}, threshold)
            return False

        previous = self.phase
        self.phase = self.phase.opposite()
        self.phase_start = self.clock()
        self._apply_phase()

        self.phase_change_history.append({
            'time': self.phase_start,
            'from': previous.value,
            'phase': self.phase.value,
        })
        logger.info("Cambio de fase: %s -> %s", previous.value, self.phase.value)
        return True

    def get_light_state_for(self, origin: Origin) -> LightState:
        """Estado del semáforo que regula el origen dado."""
        return self.lights[origin].state

    def green_origins(self) -> List[Origin]:
        """Orígenes con verde en este momento."""
        return [origin for origin, light in self.lights.items() if light.is_green()]

    def reset(self):
        """Vuelve a la fase inicial y reinicia el temporizador y las estadísticas."""
        self.phase = self._initial_phase
        self.phase_start = self.clock()
        self._apply_phase()
        self.phase_change_history.clear()
        self.extension_checks = 0

    def get_status_string(self) -> str:
        """
        Retorna una representación visual del estado actual.

        Returns:
            str: String con estado formateado
        """
        symbols = {LightState.GREEN: "🟢", LightState.RED: "🔴"}
        lights = " ".join(f"{o.value[0].upper()}{symbols[l.state]}"
                          for o, l in self.lights.items())

        status = f"Fase: {self.phase.value} | {lights} | "
        status += f"Tiempo en fase: {self.elapsed():.1f}s / {self.base_duration}s | "
        status += f"Cambios: {len(self.phase_change_history)}"
        return status

    def __repr__(self) -> str:
        return (f"LightController(phase={self.phase.value}, "
                f"base={self.base_duration}s, "
                f"capacity={self.lane_capacity()})")
