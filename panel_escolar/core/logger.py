"""
Logging centralizado del panel.

Reemplaza los print() por logs con formato uniforme hacia stdout.
"""

import logging
import sys

from panel_escolar.config.settings import settings


def get_logger(name: str) -> logging.Logger:
    """
    Configura y devuelve un logger con formato estándar.

    Args:
        name (str): nombre del módulo que registra (normalmente __name__).

    Returns:
        logging.Logger: logger listo para usar.
    """
    logger = logging.getLogger(name)

    # Evita duplicar handlers si el logger ya fue configurado
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        logger.addHandler(handler)

    return logger
