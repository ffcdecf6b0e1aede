"""
Script de ejemplo: Simulación interactiva de la intersección

Abre una ventana con la intersección y permite generar vehículos con el
teclado:
    ↑  vehículo desde el borde sur      ↓  vehículo desde el borde norte
    ←  vehículo desde el borde este     →  vehículo desde el borde oeste
    R  vehículo desde un borde al azar  Esc  salir
"""

import sys
import time
from pathlib import Path

import pygame

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator import IntersectionSimulator, SimulationLoop
from src.utils.config import WindowConfig, setup_logging
from src.visualization import PygameInput, PygameRenderer


def main() -> int:
    """Función principal del ejemplo."""
    setup_logging(to_file=True)

    print("="*70)
    print("SIMULACIÓN INTERACTIVA - Intersección de cuatro vías")
    print("="*70)
    print("  ↑ ↓ ← → : generar vehículo | R: al azar | Esc: salir")

    try:
        renderer = PygameRenderer()
    except pygame.error as e:
        print(f"✗ No se pudo abrir la ventana: {e}")
        return 1

    # En la ventana los semáforos siguen el reloj real
    simulator = IntersectionSimulator(ticks_per_second=WindowConfig.FPS,
                                      clock=time.monotonic)
    loop = SimulationLoop(simulator, renderer, PygameInput(), pause=renderer.pause)

    try:
        ticks = loop.run()
    finally:
        renderer.close()

    metrics = simulator.calculate_final_metrics()
    print(f"\n✓ Simulación terminada tras {ticks} ticks")
    print(f"  Vehículos generados: {metrics['vehicles_spawned']}")
    print(f"  Vehículos que salieron: {metrics['vehicles_exited']}")
    print(f"  Cambios de fase: {metrics['phase_changes']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
