"""
Tests para el modelo de movimiento (VehicleMotionModel).
"""

import pytest
import sys
from pathlib import Path

import pygame

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator.intersection import IntersectionGeometry, Origin
from src.simulator.motion import VehicleMotionModel
from src.simulator.traffic_light import LightState
from src.simulator.traffic_simulator import IntersectionSimulator
from src.simulator.vehicle import Route, Vehicle


class FixedLights:
    """Controlador mínimo con estados fijos por origen."""

    def __init__(self, default=LightState.GREEN, **states):
        self.default = default
        self.states = {Origin.from_name(name): state for name, state in states.items()}

    def get_light_state_for(self, origin):
        return self.states.get(origin, self.default)


def north_vehicle(y):
    """Vehículo del norte en su carril de entrada con borde superior en y."""
    g = IntersectionGeometry()
    rect = g.spawn_rect(Origin.NORTH)
    rect.y = y
    return Vehicle(rect, (0, 2), (255, 215, 0), Origin.NORTH)


class TestCarFollowing:
    """Tests de seguimiento entre vehículos."""

    def test_following_distance(self):
        """Test de distancia de seguimiento: largo + distancia de seguridad."""
        model = VehicleMotionModel()
        assert model.following_distance == 60

    def test_exact_following_distance_is_not_blocking(self):
        """Test de borde: distancia exacta no bloquea, una unidad menos sí."""
        model = VehicleMotionModel()

        follower = north_vehicle(100)  # borde delantero en 140
        leader = north_vehicle(200)    # borde trasero en 200 -> gap 60
        vehicles = [follower, leader]
        snapshot = model.take_snapshot(vehicles)
        assert not model.is_blocked_by_vehicle(follower, 0, snapshot)

        leader.rect.y = 199  # gap 59
        snapshot = model.take_snapshot(vehicles)
        assert model.is_blocked_by_vehicle(follower, 0, snapshot)

    def test_vehicle_behind_does_not_block(self):
        """Test de que un vehículo detrás no detiene al de adelante."""
        model = VehicleMotionModel()
        leader = north_vehicle(200)
        follower = north_vehicle(150)
        vehicles = [leader, follower]

        snapshot = model.take_snapshot(vehicles)
        assert not model.is_blocked_by_vehicle(leader, 0, snapshot)

    def test_other_origin_does_not_block(self):
        """Test de que sólo bloquean vehículos del mismo origen."""
        model = VehicleMotionModel()
        g = IntersectionGeometry()

        follower = north_vehicle(100)
        other = Vehicle(pygame.Rect(360, 150, 30, 40), (0, -2), (0, 0, 255), Origin.SOUTH)
        snapshot = model.take_snapshot([follower, other])

        assert not model.is_blocked_by_vehicle(follower, 0, snapshot)
        assert g.lane_offset(Origin.NORTH, False) == follower.rect.x

    def test_different_outbound_flag_does_not_block(self):
        """Test de que un vehículo ya saliente no bloquea a uno entrante."""
        model = VehicleMotionModel()
        follower = north_vehicle(100)
        leader = north_vehicle(170)
        leader.outbound = True

        snapshot = model.take_snapshot([follower, leader])
        assert not model.is_blocked_by_vehicle(follower, 0, snapshot)

    def test_result_independent_of_update_order(self):
        """Test de resultado igual con cualquier orden (copia previa al tick)."""
        model = VehicleMotionModel()
        lights = FixedLights()

        results = []
        for order in ([0, 1], [1, 0]):
            leader = north_vehicle(200)
            follower = north_vehicle(101)  # gap 59 antes del tick
            pair = [leader, follower]
            vehicles = [pair[i] for i in order]

            model.step(vehicles, lights)
            results.append((leader.rect.y, leader.stopped, follower.rect.y, follower.stopped))

        assert results[0] == results[1] == (202, False, 101, True)


class TestRedLight:
    """Tests de detención ante semáforo en rojo."""

    def test_stops_in_band_on_red(self):
        """Test de detención con borde delantero en la banda de la línea."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(302)  # borde delantero en 342

        assert model.is_at_red_light(vehicle, LightState.RED)
        assert not model.is_at_red_light(vehicle, LightState.GREEN)

    def test_band_limits(self):
        """Test de límites de la banda (350 - 10, 350]."""
        model = VehicleMotionModel()

        assert model.is_at_red_light(north_vehicle(310), LightState.RED)      # 350
        assert not model.is_at_red_light(north_vehicle(300), LightState.RED)  # 340
        assert not model.is_at_red_light(north_vehicle(312), LightState.RED)  # 352

    def test_past_stop_line_keeps_moving(self):
        """Test de que un vehículo que pasó la línea sigue en rojo."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(320)
        vehicles = [vehicle]

        model.step(vehicles, FixedLights(north=LightState.RED))

        assert not vehicle.stopped
        assert vehicle.rect.y == 322

    def test_red_check_ignores_outbound_flag(self):
        """Test de que la detención no depende del indicador de salida."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(302)
        vehicle.outbound = True

        assert model.is_at_red_light(vehicle, LightState.RED)

    def test_approach_from_each_origin(self):
        """Test de detención ante rojo desde los cuatro orígenes."""
        model = VehicleMotionModel()
        g = IntersectionGeometry()
        lights = FixedLights(default=LightState.RED)

        for origin in Origin:
            vehicle = Vehicle(g.spawn_rect(origin), g.velocity(origin, 2), (0, 0, 0), origin)
            vehicles = [vehicle]
            for _ in range(400):
                model.step(vehicles, lights)

            assert vehicle.stopped
            leading = g.leading_progress(vehicle.rect, origin)
            stop_line = g.stop_line_progress(origin)
            assert stop_line - 10 < leading <= stop_line


class TestResolution:
    """Tests de resolución de posición."""

    def test_moving_vehicle_advances_by_velocity(self):
        """Test de avance exacto del vector velocidad."""
        model = VehicleMotionModel()
        g = IntersectionGeometry()

        for origin in Origin:
            vehicle = Vehicle(g.spawn_rect(origin), g.velocity(origin, 2), (0, 0, 0), origin)
            before = vehicle.rect.copy()
            model.step([vehicle], FixedLights())

            assert not vehicle.stopped
            assert vehicle.rect.x - before.x == vehicle.velocity[0]
            assert vehicle.rect.y - before.y == vehicle.velocity[1]

    def test_stopped_vehicle_keeps_position(self):
        """Test de posición inmóvil mientras está detenido."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(302)
        vehicles = [vehicle]

        for _ in range(10):
            model.step(vehicles, FixedLights(north=LightState.RED))
            assert vehicle.stopped
            assert vehicle.rect.topleft == (360, 302)

        assert vehicle.ticks_stopped == 10
        assert vehicle.num_stops == 1


class TestOutbound:
    """Tests de transición a carril de salida."""

    def test_not_outbound_at_center(self):
        """Test de que el borde justo en el centro aún no cuenta como cruce."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(360)  # borde delantero en 400

        assert not model.update_outbound(vehicle)
        assert vehicle.rect.x == 360

    def test_outbound_after_center(self):
        """Test de cambio a carril de salida tras cruzar el centro."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(362)  # borde delantero en 402

        assert model.update_outbound(vehicle)
        assert vehicle.outbound
        assert vehicle.rect.x == 410
        assert vehicle.rect.y == 362

        # Una sola vez
        assert not model.update_outbound(vehicle)
        assert vehicle.rect.x == 410

    def test_outbound_preserves_origin(self):
        """Test de origen invariante a lo largo de todo el recorrido."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(0)
        vehicles = [vehicle]

        for _ in range(399):
            model.step(vehicles, FixedLights())
            assert vehicle.origin == Origin.NORTH

        assert vehicle.outbound


class TestRoute:
    """Tests de la intención de giro."""

    def test_route_does_not_affect_motion(self):
        """Test de trayectorias idénticas para vehículos que sólo difieren en la ruta."""
        model = VehicleMotionModel()
        red, green = FixedLights(north=LightState.RED), FixedLights()

        histories = []
        for route in Route:
            vehicle = north_vehicle(0)
            vehicle.route = route
            vehicles = [vehicle]
            history = []
            for tick in range(600):
                model.step(vehicles, red if tick < 250 else green)
                history.append((tuple(vehicle.rect), vehicle.stopped, vehicle.outbound))
            histories.append(history)

        assert any(stopped for _, stopped, _ in histories[0])
        for history in histories[1:]:
            assert history == histories[0]

    def test_route_does_not_affect_rendering(self):
        """Test de dibujo idéntico para vehículos que sólo difieren en la ruta."""
        frames = []
        for route in Route:
            simulator = IntersectionSimulator(base_duration=2.0)
            simulator.request_spawn(Origin.EAST).route = route
            states = []
            for _ in range(400):
                simulator.step()
                states.append(simulator.get_render_state().vehicles)
            frames.append(states)

        for states in frames[1:]:
            assert states == frames[0]


class TestCull:
    """Tests de eliminación de vehículos fuera del área."""

    def test_cull_when_fully_outside(self):
        """Test de eliminación en el mismo tick en que sale del área."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(798)
        vehicle.outbound = True
        vehicles = [vehicle]

        removed = model.step(vehicles, FixedLights())

        assert vehicle.rect.top == 800
        assert removed == [vehicle]
        assert vehicles == []

    def test_partially_visible_vehicle_stays(self):
        """Test de que un vehículo parcialmente visible no se elimina."""
        model = VehicleMotionModel()
        vehicle = north_vehicle(796)
        vehicle.outbound = True
        vehicles = [vehicle]

        removed = model.step(vehicles, FixedLights())

        assert removed == []
        assert vehicles == [vehicle]

    def test_validation(self):
        """Test de validación de parámetros."""
        with pytest.raises(ValueError):
            VehicleMotionModel(stop_line_band=0)

        with pytest.raises(ValueError):
            VehicleMotionModel(safety_gap=-5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
