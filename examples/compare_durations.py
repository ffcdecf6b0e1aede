"""
Script de comparación: duración base de las fases

Ejecuta la simulación sin ventana con distintas duraciones base de fase
y con distintos niveles de tráfico, y compara colas, esperas y throughput.
Guarda los resultados en CSV y una captura del estado final.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator import IntersectionSimulator, TrafficGenerator
from src.utils.metrics import MetricsCalculator
from src.visualization import render_snapshot, save_snapshot

SIMULATION_TICKS = 60 * 60 * 3  # 3 minutos a 60 ticks/s
SEED = 42


def run_configuration(base_duration: float, arrivals_per_minute: float):
    """
    Ejecuta una simulación con la configuración dada.

    Returns:
        tuple: (simulador, métricas)
    """
    simulator = IntersectionSimulator(base_duration=base_duration, seed=SEED)
    generator = TrafficGenerator(arrivals_per_minute=arrivals_per_minute,
                                 ticks_per_second=simulator.ticks_per_second,
                                 seed=SEED)
    metrics = simulator.run(SIMULATION_TICKS, generator=generator, verbose=False)
    return simulator, metrics


def compare_durations(arrivals_per_minute: float = 40.0):
    """Compara distintas duraciones base con el mismo tráfico."""
    print("\n" + "="*80)
    print(f"COMPARACIÓN DE DURACIONES BASE ({arrivals_per_minute:.0f} veh/min)")
    print("="*80)

    results = {}
    last_simulator = None
    for base_duration in [3.0, 5.0, 8.0, 12.0]:
        last_simulator, metrics = run_configuration(base_duration, arrivals_per_minute)
        results[f"base_{base_duration:.0f}s"] = metrics

    calc = MetricsCalculator()
    df = calc.create_summary_dataframe(results)
    print("\n" + df.to_string(index=False))

    path = calc.export_csv(df, "duration_comparison.csv")
    print(f"\n✓ Resumen guardado en {path}")

    improvements = calc.calculate_improvement(results["base_5s"], results["base_8s"])
    print("\nMejoras de 8s respecto a 5s:")
    for metric, improvement in improvements.items():
        symbol = "✓" if improvement > 0 else "✗"
        print(f"  {symbol} {metric:25s}: {improvement:+.1f}%")

    return last_simulator


def compare_traffic_levels():
    """Compara niveles de tráfico con la duración base por defecto."""
    print("\n" + "="*80)
    print("COMPARACIÓN DE NIVELES DE TRÁFICO")
    print("="*80)

    results = {}
    for name, rate in [("low", 15.0), ("medium", 40.0), ("high", 80.0)]:
        _, metrics = run_configuration(5.0, rate)
        results[name] = metrics

    df = MetricsCalculator.create_summary_dataframe(results)
    print("\n" + df.to_string(index=False))


def main():
    """Función principal del ejemplo."""
    print("="*80)
    print("COMPARACIÓN DE CONFIGURACIONES DEL CONTROLADOR")
    print("="*80)

    simulator = compare_durations()

    # Historial de colas y captura del último estado
    queue_df = MetricsCalculator.create_queue_dataframe(simulator.queue_length_history)
    path = MetricsCalculator.export_csv(queue_df, "queue_history.csv")
    print(f"✓ Historial de colas guardado en {path}")

    fig = render_snapshot(simulator.get_render_state(), simulator.geometry)
    path = save_snapshot(fig, "final_state")
    print(f"✓ Captura guardada en {path}")

    compare_traffic_levels()

    print("\n" + "="*80)
    print("COMPARACIÓN COMPLETADA")
    print("="*80)


if __name__ == "__main__":
    main()
