"""
main.py

Entry point for the Quantum Operation CLI.
Configures logging and launches the interactive shell.
"""

from cli import interactive_cli
from qop.config import EngineConfig
from qop.logging_config import setup_logging


def main():
    """
    Launch the operation CLI.

    Ensures:
         The interactive CLI is started with settings from the environment.
    """
    config = EngineConfig.from_env()
    setup_logging(config.log_level)
    print("=== Starting Quantum Operation CLI ===")
    interactive_cli(config)


if __name__ == '__main__':
    main()
