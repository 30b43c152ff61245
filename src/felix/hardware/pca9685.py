"""
Layer 1.2 — PCA9685 SERVO DRIVER
===============================

Authoritative low-level driver for the PCA9685 board.

Responsibilities:
- Initialize PCA9685 at 50 Hz
- Convert servo angle (degrees) -> PWM pulse
- Write pulse to a PCA channel
- Provide the actuator handle the leg registry binds to each joint

NON-RESPONSIBILITIES:
- No leg semantics
- No gait logic
- No IK
- No timing loops

Writes are fire-and-forget: the servo is never polled for completion.
"""

import logging
import time

from felix.hardware.i2c_bus import get_i2c_bus
from felix.hardware.absolute_truths import (
    PCA_ADDR,
    MODE1,
    PRESCALE,
    LED0_ON_L,
    PWM_FREQ_HZ,
    OSC_CLOCK_HZ,
    PULSE_MIN,
    PULSE_MAX,
    SERVO_RANGE,
)

log = logging.getLogger(__name__)

# Buses already brought up (keyed by id so fakes work too)
_initialized = set()


def init_pca(bus=None, address: int = PCA_ADDR):
    """
    Initialize PCA9685 for 50 Hz servo operation.
    Safe to call more than once.
    """
    bus = bus if bus is not None else get_i2c_bus()
    if (id(bus), address) in _initialized:
        return

    # Reset
    bus.write_byte_data(address, MODE1, 0x00)
    time.sleep(0.01)

    prescale = int(OSC_CLOCK_HZ / (4096 * PWM_FREQ_HZ) - 1)

    bus.write_byte_data(address, MODE1, 0x10)      # sleep
    bus.write_byte_data(address, PRESCALE, prescale)
    bus.write_byte_data(address, MODE1, 0x00)      # wake
    bus.write_byte_data(address, MODE1, 0x80)      # restart

    time.sleep(0.01)
    _initialized.add((id(bus), address))
    log.info("[PCA] Initialized 0x%02x at %d Hz (prescale %d)", address, PWM_FREQ_HZ, prescale)


# ----------------------------
# Angle → PWM conversion
# ----------------------------

def angle_to_pulse(angle_deg: float) -> int:
    """
    Convert a servo angle in degrees to a PCA9685 pulse value.

    Clamps to the servo travel and to the electrical limits.
    """
    if angle_deg < 0:
        angle_deg = 0.0
    elif angle_deg > SERVO_RANGE:
        angle_deg = float(SERVO_RANGE)

    pulse = int(PULSE_MIN + (angle_deg / SERVO_RANGE) * (PULSE_MAX - PULSE_MIN))

    if pulse < PULSE_MIN:
        pulse = PULSE_MIN
    elif pulse > PULSE_MAX:
        pulse = PULSE_MAX

    return pulse


# ----------------------------
# Output primitive
# ----------------------------

def set_servo_angle(channel: int, angle_deg: float, bus=None, address: int = PCA_ADDR):
    """
    Set a single PCA9685 channel to a servo angle (degrees).
    """
    bus = bus if bus is not None else get_i2c_bus()
    init_pca(bus, address)

    pulse = angle_to_pulse(angle_deg)

    base = LED0_ON_L + 4 * channel
    bus.write_byte_data(address, base, 0x00)                  # ON_L
    bus.write_byte_data(address, base + 1, 0x00)              # ON_H
    bus.write_byte_data(address, base + 2, pulse & 0xFF)      # OFF_L
    bus.write_byte_data(address, base + 3, (pulse >> 8) & 0x0F)  # OFF_H


class PCA9685Servo:
    """Actuator handle for one PCA9685 channel."""

    def __init__(self, pin: int, bus=None, address: int = PCA_ADDR):
        self.pin = pin
        self.bus = bus
        self.address = address
        self.angle = None

    def set_angle(self, degrees: float):
        set_servo_angle(self.pin, degrees, bus=self.bus, address=self.address)
        self.angle = degrees

    def __repr__(self):
        return f"PCA9685Servo(pin={self.pin}, address=0x{self.address:02x})"
