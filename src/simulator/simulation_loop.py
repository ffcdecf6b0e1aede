"""
Bucle de simulación: entrada, actualización y dibujo.

El bucle no conoce pygame: recibe un origen de teclas y un destino de
dibujo como colaboradores. Cada tick drena las teclas, las traduce en
pedidos de aparición o en la orden de salir, avanza la simulación,
entrega el estado al dibujo y hace una pausa fija.
"""

from typing import Callable, Dict, Iterable, List, Optional, Protocol
from enum import Enum
import logging

from .intersection import Origin
from .traffic_simulator import IntersectionSimulator, RenderState

logger = logging.getLogger(__name__)


class Key(Enum):
    """Teclas que entiende la simulación."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    R = "r"
    ESCAPE = "escape"
    WINDOW_CLOSE = "window_close"


class Command(Enum):
    """Órdenes que produce la entrada."""
    SPAWN_NORTH = "spawn_north"
    SPAWN_SOUTH = "spawn_south"
    SPAWN_EAST = "spawn_east"
    SPAWN_WEST = "spawn_west"
    SPAWN_RANDOM = "spawn_random"
    QUIT = "quit"


# Flecha arriba: vehículo que entra por el borde sur y va hacia el norte, etc.
KEY_COMMANDS: Dict[Key, Command] = {
    Key.UP: Command.SPAWN_SOUTH,
    Key.DOWN: Command.SPAWN_NORTH,
    Key.LEFT: Command.SPAWN_EAST,
    Key.RIGHT: Command.SPAWN_WEST,
    Key.R: Command.SPAWN_RANDOM,
    Key.ESCAPE: Command.QUIT,
    Key.WINDOW_CLOSE: Command.QUIT,
}

# None = origen aleatorio
COMMAND_ORIGINS: Dict[Command, Optional[Origin]] = {
    Command.SPAWN_NORTH: Origin.NORTH,
    Command.SPAWN_SOUTH: Origin.SOUTH,
    Command.SPAWN_EAST: Origin.EAST,
    Command.SPAWN_WEST: Origin.WEST,
    Command.SPAWN_RANDOM: None,
}


def command_for_key(key: Key) -> Optional[Command]:
    """Orden asociada a una tecla (None si la tecla no tiene función)."""
    return KEY_COMMANDS.get(key)


class Renderer(Protocol):
    """Destino de dibujo: recibe el estado de cada tick."""

    def draw(self, state: RenderState) -> None:
        ...


class InputSource(Protocol):
    """Origen de teclas: devuelve las pulsadas desde la última consulta."""

    def poll(self) -> List[Key]:
        ...


class ScriptedInput:
    """Entrada que reproduce una secuencia fija de teclas por tick."""

    def __init__(self, frames: Iterable[Iterable[Key]]):
        """
        Args:
            frames: Teclas de cada tick, en orden. Agotada la secuencia,
                    no se producen más teclas.
        """
        self._frames = [list(frame) for frame in frames]
        self._position = 0

    def poll(self) -> List[Key]:
        if self._position >= len(self._frames):
            return []
        keys = self._frames[self._position]
        self._position += 1
        return keys


class SimulationLoop:
    """
    Bucle de paso fijo: entrada -> actualización -> dibujo -> pausa.

    El simulador es propiedad exclusiva del bucle; la salida sólo se
    observa entre ticks.
    """

    def __init__(self, simulator: IntersectionSimulator,
                 renderer: Renderer,
                 input_source: InputSource,
                 pause: Callable[[], None] = None):
        """
        Inicializa el bucle.

        Args:
            simulator: Contexto de simulación
            renderer: Destino de dibujo
            input_source: Origen de teclas
            pause: Pausa de fin de cuadro (default: ninguna)
        """
        self.simulator = simulator
        self.renderer = renderer
        self.input_source = input_source
        self.pause = pause or (lambda: None)
        self.running = False
        self.ticks_executed = 0

    def read_commands(self) -> List[Command]:
        """Drena la entrada y la traduce a órdenes."""
        commands = []
        for key in self.input_source.poll():
            command = command_for_key(key)
            if command is not None:
                commands.append(command)
        return commands

    def tick(self) -> bool:
        """
        Ejecuta un tick completo.

        Returns:
            bool: False si se recibió la orden de salir (el tick no se ejecuta)
        """
        commands = self.read_commands()
        if Command.QUIT in commands:
            logger.info("Salida solicitada en el tick %d", self.simulator.current_tick)
            return False

        requests = [COMMAND_ORIGINS[command] for command in commands]
        self.simulator.step(requests)
        self.renderer.draw(self.simulator.get_render_state())
        self.ticks_executed += 1
        self.pause()
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Ejecuta ticks hasta recibir la orden de salir.

        Args:
            max_ticks: Límite de ticks (opcional)

        Returns:
            int: Ticks ejecutados
        """
        self.running = True
        while self.running:
            if max_ticks is not None and self.ticks_executed >= max_ticks:
                break
            self.running = self.tick()

        self.running = False
        return self.ticks_executed
