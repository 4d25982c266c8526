"""
Configuration module: Settings, logging, constants.
"""

from food_shared.config.settings import Settings, get_settings
from food_shared.config.logging import get_logger, setup_logging
from food_shared.config.constants import (
    Role,
    OrderStatus,
    ORDER_TRANSITIONS,
    Limits,
    ErrorMessages,
)

__all__ = [
    # settings
    "Settings",
    "get_settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Role",
    "OrderStatus",
    "ORDER_TRANSITIONS",
    "Limits",
    "ErrorMessages",
]
