"""
Tests para el módulo de semáforos (LightController).
"""

import pytest
import sys
from pathlib import Path
from types import SimpleNamespace

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator.intersection import Origin
from src.simulator.traffic_light import LightController, LightState, Phase, TrafficLight


class FakeClock:
    """Reloj controlado manualmente."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def queued(origin, count):
    """Vehículos detenidos de un origen."""
    return [SimpleNamespace(origin=origin, stopped=True) for _ in range(count)]


def assert_valid_pair(controller):
    green = set(controller.green_origins())
    assert green in ({Origin.NORTH, Origin.SOUTH}, {Origin.EAST, Origin.WEST})
    assert green == set(controller.phase.origins)


class TestPhase:
    """Tests para la enumeración Phase."""

    def test_phase_origins(self):
        """Test de orígenes de cada fase."""
        assert Phase.NORTH_SOUTH.origins == (Origin.NORTH, Origin.SOUTH)
        assert Phase.EAST_WEST.origins == (Origin.EAST, Origin.WEST)

    def test_opposite(self):
        """Test de fase opuesta."""
        assert Phase.NORTH_SOUTH.opposite() == Phase.EAST_WEST
        assert Phase.EAST_WEST.opposite() == Phase.NORTH_SOUTH


class TestLightController:
    """Tests para la clase LightController."""

    def test_initial_state(self):
        """Test de estado inicial: Norte-Sur en verde."""
        controller = LightController(clock=FakeClock())

        assert controller.phase == Phase.NORTH_SOUTH
        assert controller.get_light_state_for(Origin.NORTH) == LightState.GREEN
        assert controller.get_light_state_for(Origin.SOUTH) == LightState.GREEN
        assert controller.get_light_state_for(Origin.EAST) == LightState.RED
        assert controller.get_light_state_for(Origin.WEST) == LightState.RED

    def test_four_lights(self):
        """Test de un semáforo por origen."""
        controller = LightController(clock=FakeClock())

        assert set(controller.lights) == set(Origin)
        for origin, light in controller.lights.items():
            assert isinstance(light, TrafficLight)
            assert light.origin == origin

    def test_lane_capacity(self):
        """Test de capacidad del carril: 350 // (40 + 20) = 5."""
        controller = LightController(clock=FakeClock())
        assert controller.lane_capacity() == 5

        controller = LightController(clock=FakeClock(), lane_length=120, safety_gap=20)
        assert controller.lane_capacity() == 2

    def test_validation(self):
        """Test de validación de parámetros."""
        with pytest.raises(ValueError):
            LightController(base_duration=0, clock=FakeClock())

        with pytest.raises(ValueError):
            LightController(lane_length=0, clock=FakeClock())

        with pytest.raises(ValueError):
            LightController(safety_gap=-1, clock=FakeClock())

    def test_no_change_before_base_duration(self):
        """Test de fase estable antes de cumplir la duración base."""
        clock = FakeClock()
        controller = LightController(base_duration=5.0, clock=clock)

        clock.now = 4.99
        assert not controller.update([])
        assert controller.phase == Phase.NORTH_SOUTH

    def test_flip_when_queues_empty(self):
        """Test de cambio único de fase al cumplir la duración base sin colas."""
        clock = FakeClock()
        controller = LightController(base_duration=5.0, clock=clock)

        clock.now = 5.0
        assert controller.update([])
        assert controller.phase == Phase.EAST_WEST
        assert controller.phase_start == 5.0
        assert controller.elapsed() == 0.0
        assert controller.get_light_state_for(Origin.EAST) == LightState.GREEN
        assert controller.get_light_state_for(Origin.NORTH) == LightState.RED

        # El temporizador se reinició: no hay otro cambio inmediato
        clock.now = 5.1
        assert not controller.update([])
        assert len(controller.phase_change_history) == 1
        assert controller.phase_change_history[0]['phase'] == 'east_west'

    def test_extension_is_rechecked_every_tick(self):
        """Test de extensión por congestión re-evaluada en cada tick."""
        clock = FakeClock()
        controller = LightController(base_duration=5.0, clock=clock)
        vehicles = queued(Origin.NORTH, 3)  # 3 > 5 / 2

        clock.now = 5.0
        assert not controller.update(vehicles)
        assert controller.phase == Phase.NORTH_SOUTH
        assert controller.phase_start == 0.0  # el temporizador sigue corriendo
        assert controller.extension_checks == 1

        for step in range(1, 20):
            clock.now = 5.0 + step * 0.5
            assert not controller.update(vehicles)
            assert controller.extension_checks == step + 1

        # Al descongestionarse, cambia en el siguiente tick
        clock.now += 0.1
        assert controller.update(queued(Origin.NORTH, 2))
        assert controller.phase == Phase.EAST_WEST

    def test_queue_at_half_capacity_does_not_extend(self):
        """Test de umbral: una cola igual a la mitad redondeada hacia abajo no extiende."""
        clock = FakeClock()
        controller = LightController(base_duration=5.0, clock=clock)

        clock.now = 5.0
        assert controller.update(queued(Origin.SOUTH, 2))
        assert controller.phase == Phase.EAST_WEST

    def test_red_queue_does_not_extend(self):
        """Test de que sólo cuentan las colas del par en verde."""
        clock = FakeClock()
        controller = LightController(base_duration=5.0, clock=clock)

        clock.now = 5.0
        assert controller.update(queued(Origin.EAST, 5) + queued(Origin.WEST, 5))
        assert controller.phase == Phase.EAST_WEST

    def test_moving_vehicles_are_not_queued(self):
        """Test de que los vehículos en marcha no cuentan como cola."""
        moving = [SimpleNamespace(origin=Origin.NORTH, stopped=False) for _ in range(5)]
        queues = LightController.queue_lengths(moving + queued(Origin.WEST, 2))

        assert queues[Origin.NORTH] == 0
        assert queues[Origin.WEST] == 2

    def test_exactly_two_green_lights(self):
        """Test de invariante: siempre exactamente un par completo en verde."""
        clock = FakeClock()
        controller = LightController(base_duration=1.0, clock=clock)

        for step in range(50):
            clock.now = step * 0.25
            controller.update([])
            assert_valid_pair(controller)
            states = [light.state for light in controller.lights.values()]
            assert states.count(LightState.GREEN) == 2
            assert states.count(LightState.RED) == 2

    def test_reset(self):
        """Test de reinicio."""
        clock = FakeClock()
        controller = LightController(base_duration=1.0, clock=clock)

        clock.now = 1.0
        controller.update([])
        clock.now = 3.0
        controller.reset()

        assert controller.phase == Phase.NORTH_SOUTH
        assert controller.phase_start == 3.0
        assert controller.phase_change_history == []
        assert_valid_pair(controller)

    def test_status_string(self):
        """Test de representación del estado."""
        controller = LightController(clock=FakeClock())
        status = controller.get_status_string()

        assert "north_south" in status
        assert "Cambios: 0" in status


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
