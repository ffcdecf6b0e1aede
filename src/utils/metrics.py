"""
Sistema de métricas y análisis de resultados.

Este módulo proporciona funciones para calcular y analizar métricas
de la simulación de la intersección a partir del historial de colas y
de las estadísticas de los vehículos.
"""

from typing import List, Dict
from pathlib import Path
import numpy as np
import pandas as pd

from src.utils.config import RESULTS_DIR, ensure_directories


class MetricsCalculator:
    """
    Calculadora de métricas de evaluación para la simulación.

    Proporciona métodos estáticos para calcular diversas métricas
    de rendimiento del controlador de semáforos.
    """

    @staticmethod
    def _all_queue_lengths(queue_history: List[Dict]) -> List[int]:
        all_lengths = []
        for snapshot in queue_history:
            all_lengths.extend(snapshot['queues'].values())
        return all_lengths

    @staticmethod
    def average_queue_length(queue_history: List[Dict]) -> float:
        """
        Calcula la longitud promedio de colas (por origen y por tick).

        Args:
            queue_history: Historial de longitudes de cola

        Returns:
            float: Longitud promedio de cola
        """
        all_lengths = MetricsCalculator._all_queue_lengths(queue_history)
        return float(np.mean(all_lengths)) if all_lengths else 0.0

    @staticmethod
    def max_queue_length(queue_history: List[Dict]) -> int:
        """
        Encuentra la longitud máxima de cola observada.

        Args:
            queue_history: Historial de longitudes de cola

        Returns:
            int: Longitud máxima de cola
        """
        all_lengths = MetricsCalculator._all_queue_lengths(queue_history)
        return int(max(all_lengths)) if all_lengths else 0

    @staticmethod
    def queue_length_by_origin(queue_history: List[Dict]) -> Dict[str, float]:
        """
        Calcula la cola promedio de cada origen.

        Args:
            queue_history: Historial de longitudes de cola

        Returns:
            dict: {nombre_origen: cola promedio}
        """
        if not queue_history:
            return {}

        df = pd.DataFrame([snapshot['queues'] for snapshot in queue_history])
        return {origin: float(value) for origin, value in df.mean().items()}

    @staticmethod
    def throughput_per_minute(vehicles: List, ticks: int, ticks_per_second: int) -> float:
        """
        Calcula el throughput (vehículos que salieron por minuto simulado).

        Args:
            vehicles: Vehículos que salieron del área
            ticks: Ticks simulados
            ticks_per_second: Ticks por segundo

        Returns:
            float: Vehículos por minuto
        """
        if ticks <= 0 or ticks_per_second <= 0:
            return 0.0

        minutes = ticks / ticks_per_second / 60.0
        return len(vehicles) / minutes

    @staticmethod
    def average_stops(vehicles: List) -> float:
        """
        Calcula el número promedio de paradas por vehículo.

        Args:
            vehicles: Lista de vehículos

        Returns:
            float: Número promedio de paradas
        """
        if not vehicles:
            return 0.0

        return float(np.mean([v.num_stops for v in vehicles]))

    @staticmethod
    def average_wait_time(vehicles: List, ticks_per_second: int) -> float:
        """
        Calcula el tiempo promedio detenido por vehículo.

        Args:
            vehicles: Lista de vehículos
            ticks_per_second: Ticks por segundo

        Returns:
            float: Espera promedio en segundos
        """
        if not vehicles:
            return 0.0

        return float(np.mean([v.ticks_stopped for v in vehicles])) / ticks_per_second

    @staticmethod
    def percentile_wait_time(vehicles: List, ticks_per_second: int,
                             percentile: float = 95) -> float:
        """
        Calcula el percentil del tiempo detenido.

        Args:
            vehicles: Lista de vehículos
            ticks_per_second: Ticks por segundo
            percentile: Percentil a calcular (0-100)

        Returns:
            float: Espera en el percentil dado, en segundos
        """
        if not vehicles:
            return 0.0

        waits = [v.ticks_stopped for v in vehicles]
        return float(np.percentile(waits, percentile)) / ticks_per_second

    @staticmethod
    def create_queue_dataframe(queue_history: List[Dict]) -> pd.DataFrame:
        """
        Convierte el historial de colas en un DataFrame (una fila por tick).

        Args:
            queue_history: Historial de longitudes de cola

        Returns:
            pd.DataFrame: Columnas tick, phase, active y una por origen
        """
        rows = []
        for snapshot in queue_history:
            row = {
                'tick': snapshot['tick'],
                'phase': snapshot['phase'],
                'active': snapshot['active'],
            }
            row.update(snapshot['queues'])
            rows.append(row)

        return pd.DataFrame(rows)

    @staticmethod
    def create_vehicle_dataframe(vehicles: List) -> pd.DataFrame:
        """
        Crea un DataFrame con las estadísticas de cada vehículo.

        Args:
            vehicles: Lista de vehículos

        Returns:
            pd.DataFrame: Una fila por vehículo
        """
        return pd.DataFrame([v.get_statistics() for v in vehicles])

    @staticmethod
    def create_summary_dataframe(results: Dict[str, Dict]) -> pd.DataFrame:
        """
        Crea un DataFrame con resumen comparativo de configuraciones.

        Args:
            results: Dict {nombre_configuración: metrics_dict}

        Returns:
            pd.DataFrame: DataFrame con métricas comparadas
        """
        data = []

        for name, metrics in results.items():
            data.append({
                'Configuration': name,
                'Avg Queue': metrics.get('avg_queue_length', 0),
                'Max Queue': metrics.get('max_queue_length', 0),
                'Throughput (veh/min)': metrics.get('throughput_per_minute', 0),
                'Avg Wait (s)': metrics.get('avg_wait_time', 0),
                'Avg Stops': metrics.get('avg_stops', 0),
                'Phase Changes': metrics.get('phase_changes', 0),
                'Exited Vehicles': metrics.get('vehicles_exited', 0)
            })

        df = pd.DataFrame(data)

        # Ordenar por espera promedio (menor es mejor)
        if not df.empty:
            df = df.sort_values('Avg Wait (s)')

        return df

    @staticmethod
    def calculate_improvement(baseline_metrics: Dict, other_metrics: Dict) -> Dict:
        """
        Calcula mejoras porcentuales respecto a baseline.

        Args:
            baseline_metrics: Métricas de la configuración de referencia
            other_metrics: Métricas de la configuración a comparar

        Returns:
            dict: Diccionario con mejoras porcentuales
        """
        improvements = {}

        # Métricas donde menor es mejor
        for metric in ['avg_wait_time', 'avg_queue_length', 'max_queue_length', 'avg_stops']:
            baseline_val = baseline_metrics.get(metric, 0)
            other_val = other_metrics.get(metric, 0)

            if baseline_val > 0:
                improvements[metric] = ((baseline_val - other_val) / baseline_val) * 100
            else:
                improvements[metric] = 0.0

        # Métricas donde mayor es mejor
        baseline_val = baseline_metrics.get('throughput_per_minute', 0)
        other_val = other_metrics.get('throughput_per_minute', 0)
        if baseline_val > 0:
            improvements['throughput_per_minute'] = ((other_val - baseline_val) / baseline_val) * 100
        else:
            improvements['throughput_per_minute'] = 0.0

        return improvements

    @staticmethod
    def export_csv(df: pd.DataFrame, filename: str, directory: Path = None) -> Path:
        """
        Guarda un DataFrame como CSV.

        Args:
            df: DataFrame a guardar
            filename: Nombre del archivo
            directory: Directorio destino (default: RESULTS_DIR)

        Returns:
            Path: Ruta del archivo escrito
        """
        if directory is None:
            ensure_directories()
            directory = RESULTS_DIR
        else:
            directory = Path(directory)
            directory.mkdir(parents=True, exist_ok=True)

        path = directory / filename
        df.to_csv(path, index=False)
        return path
