"""
Configuration for the operation engine and its interactive shell.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tunable constants shared by the simulator, interpolator and parser."""

    # Rotation used when an operation is applied without one (whole turns)
    default_rotation: float = 0.5

    # Squared radius below which an amplitude's phase is treated as undefined
    tween_epsilon: float = 1e-6

    # Amplitudes smaller than this are hidden from ket listings
    display_tolerance: float = 1e-6

    # Limits on user-entered rotation expressions
    max_expression_length: int = 256
    max_expression_depth: int = 32

    # Interactive shell
    initial_qubits: int = 0
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config, overriding shell settings from QOP_* variables."""
        config = cls()
        level = os.environ.get("QOP_LOG_LEVEL")
        if level:
            config.log_level = logging.getLevelName(level.upper())
            if not isinstance(config.log_level, int):
                raise ValueError(f"Unknown log level '{level}'")
        qubits = os.environ.get("QOP_QUBITS")
        if qubits:
            config.initial_qubits = int(qubits)
            if config.initial_qubits < 0:
                raise ValueError("QOP_QUBITS must not be negative")
        return config


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
