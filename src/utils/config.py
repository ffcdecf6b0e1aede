"""
Configuración global del simulador de intersección.

Este módulo contiene todas las constantes y parámetros de configuración
utilizados en el proyecto: geometría de la ventana y de las calles,
dimensiones de vehículos, tiempos de semáforo, colores y logging.
"""

import logging
from pathlib import Path

# Rutas del proyecto
PROJECT_ROOT = Path(__file__).parent.parent.parent
RESULTS_DIR = PROJECT_ROOT / "experiments" / "results"


# Geometría de la ventana y de la intersección
class WindowConfig:
    """Dimensiones de la ventana y de las calles (píxeles)."""

    WIDTH = 800
    HEIGHT = 800
    TITLE = "Traffic Simulation"

    # Frecuencia de actualización
    FPS = 60  # ticks por segundo

    # Calles: una vertical y una horizontal que se cruzan en el centro
    ROAD_WIDTH = 100
    LANE_WIDTH = ROAD_WIDTH // 2  # dos carriles por calle (entrada y salida)

    CENTER_X = WIDTH // 2
    CENTER_Y = HEIGHT // 2

    # Largo del carril de aproximación (desde el borde hasta la línea de detención)
    APPROACH_LENGTH = (WIDTH - ROAD_WIDTH) // 2


# Parámetros de vehículos
class VehicleConfig:
    """Configuración de vehículos."""

    WIDTH = 30   # píxeles, perpendicular al eje de marcha
    HEIGHT = 40  # píxeles, a lo largo del eje de marcha
    SAFETY_GAP = 20  # píxeles mínimos con el vehículo de adelante

    SPEED = 2  # píxeles por tick

    # Colores por origen (RGB)
    COLORS = {
        "north": (255, 215, 0),
        "south": (30, 144, 255),
        "east": (255, 99, 71),
        "west": (186, 85, 211),
    }


# Parámetros de semáforos
class TrafficLightConfig:
    """Configuración de semáforos."""

    BASE_PHASE_DURATION = 5.0  # segundos de verde antes de evaluar el cambio
    SIZE = 20  # píxeles (lado del cuadrado del semáforo)

    # Banda antes de la línea de detención donde un rojo detiene al vehículo
    STOP_LINE_BAND = 10  # píxeles


# Visualización
class VisualizationConfig:
    """Configuración de visualización."""

    BACKGROUND_COLOR = (34, 139, 34)
    ROAD_COLOR = (60, 60, 60)
    LANE_LINE_COLOR = (200, 200, 200)

    LIGHT_COLORS = {
        "green": (0, 200, 0),
        "red": (220, 0, 0),
    }

    # Figuras de matplotlib
    FIGURE_SIZE = (8, 8)
    DPI = 100
    SAVE_FORMAT = "png"


# Logging
class LoggingConfig:
    """Configuración de logging."""

    LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE = PROJECT_ROOT / "simulation.log"


def setup_logging(level: str = LoggingConfig.LOG_LEVEL, to_file: bool = False):
    """
    Configura el logging raíz según LoggingConfig.

    Args:
        level: Nivel de logging ("DEBUG", "INFO", ...)
        to_file: Si True, también escribe en LoggingConfig.LOG_FILE
    """
    handlers = [logging.StreamHandler()]
    if to_file:
        handlers.append(logging.FileHandler(LoggingConfig.LOG_FILE, encoding="utf-8"))

    logging.basicConfig(level=level, format=LoggingConfig.LOG_FORMAT,
                        handlers=handlers, force=True)


# Crear directorios si no existen
def ensure_directories():
    """Crea los directorios necesarios si no existen."""
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)


if __name__ == "__main__":
    print(f"Directorio del proyecto: {PROJECT_ROOT}")
    print(f"Directorio de resultados: {RESULTS_DIR}")
    ensure_directories()
    print("Directorios verificados/creados correctamente")
