from prometheus_client import Counter


class TicketingMetrics:
    """
    Ticketing System Core Metrics Collector

    Seat inventory counters are exported by the inventory service, saga and webhook
    counters by the order service. Both processes expose them on GET /metrics.
    """

    def __init__(self):
        # ========== Seat Inventory Metrics ==========
        self.seat_reservations = Counter(
            'seat_reservations_total',
            'Total reserve requests received',
        )

        self.seat_reservations_failed = Counter(
            'seat_reservations_failed_total',
            'Reserve requests that did not hold every requested seat',
        )

        self.seat_allocations = Counter(
            'seat_allocations_total',
            'Successful seat allocations',
        )

        # ========== Hold Expiry Sweeper Metrics ==========
        self.hold_expiry_released = Counter(
            'hold_expiry_released_total',
            'Expired holds released by the sweeper',
        )

        self.hold_expiry_failures = Counter(
            'hold_expiry_failures_total',
            'Sweeper runs rolled back after an error',
        )

        # ========== Order Saga Metrics ==========
        self.saga_compensation_failures = Counter(
            'saga_compensation_failures_total',
            'Compensating actions that failed',
            ['action'],  # release_seats/refund_payment
        )

        self.webhook_failures = Counter(
            'webhook_failures_total',
            'Webhook callbacks that raised while being handled',
            ['source'],  # payment/reservation
        )

    # ========== Helper Methods ==========

    def record_reservation(self, *, success: bool) -> None:
        self.seat_reservations.inc()
        if not success:
            self.seat_reservations_failed.inc()

    def record_allocation(self) -> None:
        self.seat_allocations.inc()

    def record_hold_expiry(self, *, released: int) -> None:
        self.hold_expiry_released.inc(released)

    def record_hold_expiry_failure(self) -> None:
        self.hold_expiry_failures.inc()

    def record_compensation_failure(self, *, action: str) -> None:
        self.saga_compensation_failures.labels(action=action).inc()

    def record_webhook_failure(self, *, source: str) -> None:
        self.webhook_failures.labels(source=source).inc()


# Global metrics instance
metrics = TicketingMetrics()
