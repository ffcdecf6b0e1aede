"""
Simulador de tráfico en una intersección de cuatro vías.

Este módulo contiene el motor de simulación que modela:
- Geometría de la intersección y orígenes de los vehículos
- Aparición de vehículos en los bordes
- Movimiento, seguimiento y detención ante semáforos
- Controlador de fases adaptado a la congestión
- Bucle de paso fijo con entrada y dibujo externos
"""

from .intersection import IntersectionGeometry, Origin
from .traffic_light import TrafficLight, LightController, LightState, Phase
from .vehicle import Vehicle, VehicleSnapshot, Route
from .traffic_generator import VehicleSpawner, TrafficGenerator
from .motion import VehicleMotionModel
from .traffic_simulator import IntersectionSimulator, RenderState
from .simulation_loop import SimulationLoop, ScriptedInput, Key, Command, command_for_key

__all__ = [
    'IntersectionGeometry',
    'Origin',
    'TrafficLight',
    'LightController',
    'LightState',
    'Phase',
    'Vehicle',
    'VehicleSnapshot',
    'Route',
    'VehicleSpawner',
    'TrafficGenerator',
    'VehicleMotionModel',
    'IntersectionSimulator',
    'RenderState',
    'SimulationLoop',
    'ScriptedInput',
    'Key',
    'Command',
    'command_for_key'
]
