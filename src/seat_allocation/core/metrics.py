"""
Prometheus metrics for monitoring
"""
import logging
from prometheus_client import Counter, Gauge, Histogram, generate_latest

logger = logging.getLogger(__name__)

# ==================== Allocation Metrics ====================

seat_allocations_total = Counter(
    'seat_allocations_total',
    'Seat allocation attempts by outcome',
    ['outcome']  # allocated, already_allocated, no_participants, no_seats, race_lost, error
)

seat_claim_conflicts_total = Counter(
    'seat_claim_conflicts_total',
    'Conditional seat claims that matched zero rows'
)

seat_releases_total = Counter(
    'seat_releases_total',
    'Seat allocations released'
)

seat_allocation_duration_seconds = Histogram(
    'seat_allocation_duration_seconds',
    'Time to run one allocation transaction',
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

# ==================== Catalog Metrics ====================

seat_grids_generated_total = Counter(
    'seat_grids_generated_total',
    'Seat grids (re)generated for a room'
)

room_occupancy_gauge = Gauge(
    'room_occupancy_gauge',
    'Denormalized occupancy counter per room',
    ['room_id']
)

# ==================== Helper Functions ====================

def record_allocation_outcome(outcome: str):
    seat_allocations_total.labels(outcome=outcome).inc()


def update_room_occupancy_gauge(room_id: int, occupancy: int):
    room_occupancy_gauge.labels(room_id=str(room_id)).set(occupancy)


def get_metrics():
    """Get current metrics in Prometheus format"""
    return generate_latest()
