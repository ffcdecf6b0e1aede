"""
Tests para la configuración y el logging.
"""

import pytest
import sys
import logging
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.utils.config import LoggingConfig, setup_logging


class TestLogging:
    """Tests para setup_logging."""

    def test_log_to_file(self, tmp_path, monkeypatch):
        """Test de escritura del log en LoggingConfig.LOG_FILE."""
        log_file = tmp_path / "simulation.log"
        monkeypatch.setattr(LoggingConfig, "LOG_FILE", log_file)

        setup_logging("DEBUG", to_file=True)
        logging.getLogger("src.simulator.traffic_light").info("Cambio de fase: prueba")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Cambio de fase: prueba" in content
        assert "INFO" in content

        # Quitar el handler de archivo
        setup_logging("WARNING")

    def test_without_file(self, tmp_path, monkeypatch):
        """Test de logging sólo por consola."""
        log_file = tmp_path / "simulation.log"
        monkeypatch.setattr(LoggingConfig, "LOG_FILE", log_file)

        setup_logging("INFO")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert not log_file.exists()

        setup_logging("WARNING")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
