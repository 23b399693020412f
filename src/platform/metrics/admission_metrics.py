from prometheus_client import Counter, Histogram


class AdmissionMetrics:
    """
    Admission and payment reconciliation metrics

    Exposed at /metrics and scraped per instance
    """

    def __init__(self):
        # ========== Ticket Admission ==========
        self.validations = Counter(
            'ticket_validations_total',
            'Ticket validation outcomes',
            ['outcome'],  # validated / already validated / wrong date / outside window
        )

        # ========== Payment Reconciliation ==========
        self.reconciliations = Counter(
            'payment_reconciliations_total',
            'Reconciled bookings by recommended action',
            ['action', 'discrepancy'],
        )

        self.gateway_errors = Counter(
            'payment_gateway_errors_total',
            'Failed bank gateway calls',
            ['operation'],  # order_details / order_transactions
        )

        self.gateway_duration = Histogram(
            'payment_gateway_request_duration_seconds',
            'Bank gateway request duration',
            ['operation'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        )

        self.reconciliations_applied = Counter(
            'payment_reconciliations_applied_total',
            'Corrective actions applied by operators',
            ['action'],
        )

    def record_validation(self, *, outcome: str):
        self.validations.labels(outcome=outcome).inc()

    def record_reconciliation(self, *, action: str, discrepancy: bool):
        self.reconciliations.labels(action=action, discrepancy=str(discrepancy).lower()).inc()

    def record_gateway_call(self, *, operation: str, duration: float, failed: bool):
        self.gateway_duration.labels(operation=operation).observe(duration)
        if failed:
            self.gateway_errors.labels(operation=operation).inc()


# Global metrics instance
admission_metrics = AdmissionMetrics()
