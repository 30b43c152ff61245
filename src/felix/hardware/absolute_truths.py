# absolute_truths.py
# ==================================================
# Mechanical & electrical truths (read-only constants)
# - PCA9685 bus, address and registers
# - Servo channel mapping, calibration trims, mirroring
# - Leg geometry and the stock gait tables
#
# If anything here is wrong the physical robot is wrong.
# Keep this file free of logic and math beyond simple constants.
# ==================================================

# --- I2C / hardware (Raspberry Pi SMBus) ---
BUS = 1                # /dev/i2c-1 on the Pi header
PCA_ADDR = 0x40        # PCA9685 I2C address

# PCA9685 registers (hardware truth)
MODE1    = 0x00
PRESCALE = 0xFE
LED0_ON_L = 0x06

PWM_FREQ_HZ = 50
OSC_CLOCK_HZ = 25_000_000

# --- Servo electrical limits (do not change lightly) ---
# Pulse steps (of 4096) at 50 Hz for the hobby servos on the legs
PULSE_MIN = 102        # ~0.5 ms
PULSE_MAX = 512        # ~2.5 ms
SERVO_RANGE = 180      # degrees of travel

# Calibration reference: femur at 90° to the body, tibia at 90° to the femur
CALIBRATION_ANGLE = 90

# --- Leg geometry (mm) ---
FEMUR = 44             # hip pivot -> knee pivot
TIBIA = 74             # knee pivot -> toe
HEIGHT = 110           # stand height, hip to ground
STEP_HEIGHT = 10       # swing arc apex above the stance line
STEP_WIDTH = 26        # fore-aft stride

# --- Motion timing ---
GRANULARITY = 3        # interpolated points per transition
FRAME_PERIOD_MS = 40   # delay between frames

# --- Gait tables ---
# Row order FR, FL, BR, BL. Pose code 1..4 = rear-most .. front-most,
# code 4 also marks the leg lifted for the transition to the next row.
GAITS = {
    "forward": [
        [1, 2, 3, 4],
        [2, 3, 4, 1],
        [3, 4, 1, 2],
        [4, 1, 2, 3],
    ],
}

# --- Leg table (order FR, FL, BR, BL) ---
# origin : hip pivot offset in the leg plane (mm)
# pin    : PCA9685 channel
# offset : calibration trim (degrees) added to every commanded angle
# invert : servo mounted mirrored
LEGS = [
    {
        "id": "FR",
        "label": "Front right",
        "origin": (10, 0),
        "hip":  {"pin": 0, "offset": 2, "invert": False},
        "knee": {"pin": 1, "offset": 4, "invert": False},
    },
    {
        "id": "FL",
        "label": "Front left",
        "origin": (15, 0),
        "hip":  {"pin": 2, "offset": 3, "invert": True},
        "knee": {"pin": 3, "offset": -4, "invert": True},
    },
    {
        "id": "BR",
        "label": "Back right",
        "origin": (10, 0),
        "hip":  {"pin": 4, "offset": -2, "invert": True},
        "knee": {"pin": 5, "offset": -6, "invert": True},
    },
    {
        "id": "BL",
        "label": "Back left",
        "origin": (0, 0),
        "hip":  {"pin": 6, "offset": -3, "invert": False},
        "knee": {"pin": 7, "offset": -4, "invert": False},
    },
]

# That's it. Pure facts only.
