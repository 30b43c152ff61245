"""
Layer 1.1 — I2C BUS OWNER
=========================

Single authoritative SMBus instance for the whole robot.

Responsibilities:
- Open the I2C bus defined in absolute_truths.py
- Own bus lifetime
- Provide a getter so the servo driver shares one bus

NON-RESPONSIBILITIES:
- No PCA9685 logic
- No retries
- No robot semantics

If something breaks here, the failure is electrical, not logical.
"""

import logging

from smbus2 import SMBus

from felix.hardware.absolute_truths import BUS

log = logging.getLogger(__name__)

# Private singleton bus instance
_bus = None


def get_i2c_bus(bus_number: int = BUS) -> SMBus:
    """
    Return the shared SMBus instance.

    Creates the bus on first call, reuses it thereafter.
    """
    global _bus
    if _bus is None:
        _bus = SMBus(bus_number)
        log.info("[I2C] Opened bus %d", bus_number)
    return _bus


def close_i2c_bus():
    """Explicitly close the I2C bus (clean shutdowns)."""
    global _bus
    if _bus is not None:
        _bus.close()
        _bus = None
        log.info("[I2C] Closed bus")
