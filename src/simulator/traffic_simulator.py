"""
Motor principal de simulación de la intersección.

Este módulo implementa el contexto de simulación: es dueño de la lista de
vehículos activos y del controlador de semáforos, y ejecuta cada tick en
orden fijo (aparición, semáforos, movimiento, eliminación, registro).
"""

from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple
import logging
import time as timer

import pygame

from .intersection import IntersectionGeometry, Origin
from .motion import VehicleMotionModel
from .traffic_generator import TrafficGenerator, VehicleSpawner
from .traffic_light import LightController, LightState, Phase
from .vehicle import Vehicle
from src.utils.config import TrafficLightConfig, VehicleConfig, WindowConfig
from src.utils.metrics import MetricsCalculator

logger = logging.getLogger(__name__)


class RenderState(NamedTuple):
    """Estado de solo lectura que se entrega al dibujo en cada tick."""
    vehicles: Tuple[Tuple[pygame.Rect, tuple], ...]
    lights: Tuple[Tuple[pygame.Rect, LightState], ...]
    phase: Phase
    tick: int


class IntersectionSimulator:
    """
    Contexto de simulación de una intersección de cuatro vías.

    Coordina la aparición de vehículos, el controlador de semáforos y el
    modelo de movimiento, y registra el historial de colas para calcular
    métricas.
    """

    def __init__(self,
                 geometry: IntersectionGeometry = None,
                 base_duration: float = TrafficLightConfig.BASE_PHASE_DURATION,
                 speed: int = VehicleConfig.SPEED,
                 safety_gap: int = VehicleConfig.SAFETY_GAP,
                 ticks_per_second: int = WindowConfig.FPS,
                 clock: Callable[[], float] = None,
                 seed: Optional[int] = None):
        """
        Inicializa el simulador.

        Args:
            geometry: Geometría de la intersección
            base_duration: Duración base de cada fase (segundos)
            speed: Velocidad de los vehículos (píxeles por tick)
            safety_gap: Distancia de seguridad (píxeles)
            ticks_per_second: Ticks por segundo de simulación
            clock: Fuente de tiempo de los semáforos. Por defecto se usa el
                   tiempo simulado (tick / ticks_per_second), de modo que la
                   simulación es determinista; la ventana interactiva pasa
                   time.monotonic.
            seed: Semilla para rutas y orígenes aleatorios
        """
        if ticks_per_second <= 0:
            raise ValueError(f"Ticks por segundo inválidos: {ticks_per_second}")

        self.geometry = geometry or IntersectionGeometry()
        self.ticks_per_second = ticks_per_second
        self.current_tick = 0

        self.spawner = VehicleSpawner(self.geometry, speed=speed,
                                      safety_gap=safety_gap, seed=seed)
        self.motion = VehicleMotionModel(self.geometry, safety_gap=safety_gap)
        self.controller = LightController(self.geometry,
                                          base_duration=base_duration,
                                          safety_gap=safety_gap,
                                          clock=clock or self.simulated_time)

        # Vehículos
        self.active_vehicles: List[Vehicle] = []
        self.exited_vehicles: List[Vehicle] = []

        # Historial para métricas
        self.queue_length_history: List[Dict] = []
        self.real_time_start = None

    def simulated_time(self) -> float:
        """Tiempo simulado en segundos."""
        return self.current_tick / self.ticks_per_second

    def request_spawn(self, origin: Optional[Origin] = None) -> Optional[Vehicle]:
        """
        Intenta crear un vehículo.

        Args:
            origin: Origen solicitado; None elige uno al azar

        Returns:
            Vehicle: El vehículo creado, o None si no había espacio
        """
        if origin is None:
            return self.spawner.spawn_random(self.active_vehicles, self.current_tick)
        return self.spawner.spawn(origin, self.active_vehicles, self.current_tick)

    def step(self, spawn_requests: Iterable[Optional[Origin]] = ()):
        """
        Ejecuta un tick de simulación.

        Args:
            spawn_requests: Orígenes a intentar (None = origen aleatorio)
        """
        # 1. Aparición de vehículos
        for origin in spawn_requests:
            self.request_spawn(origin)

        # 2. Semáforos
        self.controller.update(self.active_vehicles)

        # 3. Movimiento y eliminación
        exited = self.motion.step(self.active_vehicles, self.controller)
        self.exited_vehicles.extend(exited)

        # 4. Registrar métricas instantáneas
        self._record_metrics()

        # 5. Avanzar tiempo
        self.current_tick += 1

    def _record_metrics(self):
        """Registra las colas de cada origen en este tick."""
        queues = self.controller.queue_lengths(self.active_vehicles)
        self.queue_length_history.append({
            'tick': self.current_tick,
            'phase': self.controller.phase.value,
            'active': len(self.active_vehicles),
            'queues': {origin.value: n for origin, n in queues.items()}
        })

    def run(self, ticks: int, generator: TrafficGenerator = None,
            verbose: bool = False) -> Dict:
        """
        Ejecuta la simulación sin ventana durante una cantidad de ticks.

        Args:
            ticks: Cantidad de ticks a simular
            generator: Fuente de llegadas (default: Poisson de 30 veh/min)
            verbose: Si True, imprime progreso

        Returns:
            dict: Métricas finales de la simulación
        """
        if generator is None:
            generator = TrafficGenerator(ticks_per_second=self.ticks_per_second)

        print(f"\n{'='*70}")
        print("INICIANDO SIMULACIÓN")
        print(f"{'='*70}")
        print(f"Duración: {ticks} ticks ({ticks / self.ticks_per_second:.1f} s)")

        self.reset()
        generator.reset()
        self.real_time_start = timer.time()

        report_interval = max(1, ticks // 10)
        for tick in range(ticks):
            self.step(generator.requests_for_tick(self.current_tick))

            if verbose and tick % report_interval == 0:
                self._print_progress()

        metrics = self.calculate_final_metrics()

        print(f"\n{'='*70}")
        print("SIMULACIÓN COMPLETADA")
        print(f"{'='*70}")
        self._print_summary(metrics)

        return metrics

    def calculate_final_metrics(self) -> Dict:
        """
        Calcula métricas finales de la simulación.

        Returns:
            dict: Diccionario con todas las métricas
        """
        calc = MetricsCalculator
        computation_time = 0.0
        if self.real_time_start:
            computation_time = timer.time() - self.real_time_start

        return {
            'avg_queue_length': calc.average_queue_length(self.queue_length_history),
            'max_queue_length': calc.max_queue_length(self.queue_length_history),
            'queue_by_origin': calc.queue_length_by_origin(self.queue_length_history),
            'throughput_per_minute': calc.throughput_per_minute(
                self.exited_vehicles, self.current_tick, self.ticks_per_second),
            'avg_stops': calc.average_stops(self.exited_vehicles),
            'avg_wait_time': calc.average_wait_time(self.exited_vehicles,
                                                    self.ticks_per_second),
            'phase_changes': len(self.controller.phase_change_history),
            'extension_checks': self.controller.extension_checks,
            'vehicles_spawned': self.spawner.total_spawned,
            'spawns_rejected': self.spawner.total_rejected,
            'vehicles_exited': len(self.exited_vehicles),
            'vehicles_active': len(self.active_vehicles),
            'simulation_ticks': self.current_tick,
            'simulation_time': self.simulated_time(),
            'computation_time': computation_time,
        }

    def _print_progress(self):
        """Imprime progreso de la simulación."""
        print(f"\n[T={self.current_tick:6d}] "
              f"Activos: {len(self.active_vehicles):3d} | "
              f"Salieron: {len(self.exited_vehicles):3d} | "
              f"Fase: {self.controller.phase.value}")
        for vehicle in self.active_vehicles:
            if vehicle.stopped:
                logger.debug(vehicle.get_status_string())

    def _print_summary(self, metrics: Dict):
        """
        Imprime resumen de métricas finales.

        Args:
            metrics: Diccionario de métricas
        """
        print(f"\nVehículos:")
        print(f"  Generados:   {metrics['vehicles_spawned']}")
        print(f"  Rechazados:  {metrics['spawns_rejected']}")
        print(f"  Salieron:    {metrics['vehicles_exited']}")
        print(f"  Activos:     {metrics['vehicles_active']}")
        print(f"  Throughput:  {metrics['throughput_per_minute']:.1f} veh/min")

        print(f"\nColas:")
        print(f"  Longitud promedio:    {metrics['avg_queue_length']:.2f} vehículos")
        print(f"  Longitud máxima:      {metrics['max_queue_length']} vehículos")
        print(f"  Espera promedio:      {metrics['avg_wait_time']:.2f} s")
        print(f"  Paradas promedio:     {metrics['avg_stops']:.2f} paradas/vehículo")

        print(f"\nSemáforos:")
        print(f"  Cambios de fase:      {metrics['phase_changes']}")
        print(f"  Ticks extendidos:     {metrics['extension_checks']}")

        print(f"\nRendimiento:")
        print(f"  Tiempo simulado:      {metrics['simulation_time']:.1f} s")
        print(f"  Tiempo de cómputo:    {metrics['computation_time']:.2f} s")

    def reset(self):
        """Reinicia el simulador al estado inicial."""
        self.current_tick = 0
        self.active_vehicles.clear()
        self.exited_vehicles.clear()
        self.queue_length_history.clear()
        self.spawner.reset()
        self.controller.reset()

    def get_render_state(self) -> RenderState:
        """Copia de solo lectura de vehículos y semáforos para el dibujo."""
        return RenderState(
            vehicles=tuple((v.rect.copy(), v.color) for v in self.active_vehicles),
            lights=tuple((light.rect.copy(), light.state)
                         for light in self.controller.lights.values()),
            phase=self.controller.phase,
            tick=self.current_tick
        )

    def get_current_state(self) -> Dict:
        """
        Retorna el estado actual completo de la simulación.

        Returns:
            dict: Estado actual
        """
        queues = self.controller.queue_lengths(self.active_vehicles)
        return {
            'tick': self.current_tick,
            'active_vehicles': len(self.active_vehicles),
            'exited_vehicles': len(self.exited_vehicles),
            'phase': self.controller.phase.value,
            'time_in_phase': self.controller.elapsed(),
            'traffic_lights': {
                origin.value: light.state.value
                for origin, light in self.controller.lights.items()
            },
            'queues': {origin.value: n for origin, n in queues.items()}
        }
