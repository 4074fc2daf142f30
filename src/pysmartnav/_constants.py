"""Internal constants shared across the library."""

USER_AGENT = "pysmartnav/0.1 (+https://github.com/pysmartnav/pysmartnav)"

# ------------------------------------------------------------------
# Geodesy
# ------------------------------------------------------------------

#: Meters per degree of latitude used by the equirectangular approximation.
METERS_PER_DEGREE: float = 111319.9

# ------------------------------------------------------------------
# Congestion model defaults
# ------------------------------------------------------------------

BASE_BETA: float = 0.4
BASE_GAMMA: float = 0.25
DECAY: float = 0.01
CRITICAL_THRESHOLD: float = 0.9
RESET_BASELINE: float = 0.1
INITIAL_INFECTED: float = 0.05

# ------------------------------------------------------------------
# Telemetry fallback range (deliberately low congestion)
# ------------------------------------------------------------------

SYNTHETIC_LOW: float = 0.1
SYNTHETIC_HIGH: float = 0.3

# ------------------------------------------------------------------
# Heatmap
# ------------------------------------------------------------------

HEATMAP_SAMPLES: int = 20
HEATMAP_JITTER_DEG: float = 0.01
HEATMAP_BASE_RADIUS: float = 20.0
HEATMAP_RADIUS_SCALE: float = 50.0
HEATMAP_OPACITY: float = 0.5

# ------------------------------------------------------------------
# Compliance
# ------------------------------------------------------------------

COMPLIANCE_THRESHOLD_M: float = 100.0
COMPLIANCE_RATE_DIVISOR: int = 100

# ------------------------------------------------------------------
# Congestion ledger
# ------------------------------------------------------------------

LEDGER_PRECISION: int = 4
LEDGER_MAX_ENTRIES: int = 10_000

# ------------------------------------------------------------------
# Notification texts
# ------------------------------------------------------------------

MSG_DEVIATION = "Route Deviation Detected! Recalculating..."
MSG_CRITICAL = "Warning: Traffic congestion is critical! Consider alternative routes."
MSG_OPTIMIZED_ROUTE = "New Optimized Route Calculated"
MSG_ROUTE_OK = "Route calculated successfully"
MSG_ECO_ROUTE_OK = "Eco-friendly route calculated successfully"

CURRENT_LOCATION = "Current Location"


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp *value* to ``[low, high]``."""
    return max(low, min(high, value))
