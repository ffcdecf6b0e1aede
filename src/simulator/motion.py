"""
Modelo de movimiento de los vehículos.

En cada tick, cada vehículo pasa por la misma secuencia:

1. Salida: si su borde delantero cruzó el centro de la intersección,
   pasa a "saliendo" y se reubica en el carril de salida.
2. Seguimiento: se detiene si otro vehículo del mismo origen y mismo
   tramo está adelante a menos de (largo + distancia de seguridad).
3. Semáforo: se detiene si aún se aproxima, su borde delantero está en la
   banda de la línea de detención y su semáforo está en rojo.
4. Resolución: detenido, o avanza su vector velocidad.
5. Eliminación: al final del tick se quitan los vehículos que quedaron
   completamente fuera del área simulada.

Todas las comparaciones entre vehículos leen una copia tomada antes del
tick, así que el resultado no depende del orden de actualización.
"""

from typing import List

from .intersection import IntersectionGeometry
from .traffic_light import LightState
from .vehicle import Vehicle, VehicleSnapshot
from src.utils.config import TrafficLightConfig, VehicleConfig


class VehicleMotionModel:
    """Transición por tick de la posición y el estado de los vehículos."""

    def __init__(self, geometry: IntersectionGeometry = None,
                 safety_gap: int = VehicleConfig.SAFETY_GAP,
                 stop_line_band: int = TrafficLightConfig.STOP_LINE_BAND):
        """
        Inicializa el modelo de movimiento.

        Args:
            geometry: Geometría de la intersección
            safety_gap: Distancia de seguridad entre vehículos (píxeles)
            stop_line_band: Ancho de la banda antes de la línea de detención
                            donde el rojo detiene al vehículo. Debe ser al
                            menos la velocidad para que ningún vehículo la saltee.
        """
        if safety_gap < 0:
            raise ValueError(f"Distancia de seguridad inválida: {safety_gap}px")
        if stop_line_band <= 0:
            raise ValueError(f"Banda de detención inválida: {stop_line_band}px")

        self.geometry = geometry or IntersectionGeometry()
        self.safety_gap = safety_gap
        self.stop_line_band = stop_line_band

    @property
    def following_distance(self) -> int:
        """Distancia por debajo de la cual un vehículo se detiene detrás de otro."""
        return self.geometry.vehicle_height + self.safety_gap

    @staticmethod
    def take_snapshot(vehicles: List[Vehicle]) -> List[VehicleSnapshot]:
        """Copia el estado de todos los vehículos antes del tick."""
        return [vehicle.snapshot(i) for i, vehicle in enumerate(vehicles)]

    def update_outbound(self, vehicle: Vehicle) -> bool:
        """
        Marca el vehículo como saliente si cruzó el centro.

        Returns:
            bool: True si la transición ocurrió en esta llamada
        """
        if vehicle.outbound:
            return False

        leading = self.geometry.leading_progress(vehicle.rect, vehicle.origin)
        if leading <= self.geometry.center_progress(vehicle.origin):
            return False

        vehicle.outbound = True
        self.geometry.set_lane(vehicle.rect, vehicle.origin, outbound=True)
        return True

    def gap_to(self, vehicle: Vehicle, other: VehicleSnapshot) -> int:
        """
        Distancia con signo desde el borde delantero del vehículo hasta el
        borde trasero de otro, sobre el eje de marcha.
        """
        leading = self.geometry.leading_progress(vehicle.rect, vehicle.origin)
        trailing = self.geometry.trailing_progress(other.rect, other.origin)
        return trailing - leading

    def is_blocked_by_vehicle(self, vehicle: Vehicle, index: int,
                              snapshot: List[VehicleSnapshot]) -> bool:
        """
        Verifica si hay un vehículo del mismo carril demasiado cerca adelante.

        Args:
            vehicle: Vehículo a evaluar
            index: Su posición en la lista de activos
            snapshot: Estado de todos los vehículos antes del tick
        """
        for other in snapshot:
            if other.index == index:
                continue
            if other.origin != vehicle.origin or other.outbound != vehicle.outbound:
                continue
            gap = self.gap_to(vehicle, other)
            if 0 < gap < self.following_distance:
                return True
        return False

    def is_at_red_light(self, vehicle: Vehicle, light_state: LightState) -> bool:
        """
        Verifica si el vehículo debe esperar en la línea de detención.

        Sólo aplica mientras el borde delantero no pasó la línea de detención;
        no depende del indicador de salida.
        """
        if light_state != LightState.RED:
            return False

        leading = self.geometry.leading_progress(vehicle.rect, vehicle.origin)
        stop_line = self.geometry.stop_line_progress(vehicle.origin)
        return stop_line - self.stop_line_band < leading <= stop_line

    def update_vehicle(self, vehicle: Vehicle, index: int,
                       snapshot: List[VehicleSnapshot], light_state: LightState):
        """
        Aplica la transición de un tick a un vehículo.

        Args:
            vehicle: Vehículo a actualizar
            index: Su posición en la lista de activos
            snapshot: Estado de todos los vehículos antes del tick
            light_state: Estado del semáforo de su origen
        """
        self.update_outbound(vehicle)

        blocked = self.is_blocked_by_vehicle(vehicle, index, snapshot)
        at_red = self.is_at_red_light(vehicle, light_state)

        if blocked or at_red:
            vehicle.set_stopped(True)
        else:
            vehicle.set_stopped(False)
            vehicle.advance()

    def cull(self, vehicles: List[Vehicle]) -> List[Vehicle]:
        """
        Quita (in-place) los vehículos completamente fuera del área simulada.

        Returns:
            list: Vehículos eliminados
        """
        removed = [v for v in vehicles if self.geometry.is_outside(v.rect)]
        if removed:
            vehicles[:] = [v for v in vehicles if not self.geometry.is_outside(v.rect)]
        return removed

    def step(self, vehicles: List[Vehicle], controller) -> List[Vehicle]:
        """
        Ejecuta un tick completo sobre todos los vehículos activos.

        Args:
            vehicles: Vehículos activos (se modifica in-place)
            controller: Controlador con get_light_state_for(origin)

        Returns:
            list: Vehículos que salieron del área en este tick
        """
        snapshot = self.take_snapshot(vehicles)

        for index, vehicle in enumerate(vehicles):
            light_state = controller.get_light_state_for(vehicle.origin)
            self.update_vehicle(vehicle, index, snapshot, light_state)

        return self.cull(vehicles)
