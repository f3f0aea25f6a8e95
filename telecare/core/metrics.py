from prometheus_client import Counter


appointments_created_total = Counter(
    "booking_appointments_created_total",
    "Total appointments persisted by the booking orchestrator",
)

booking_conflicts_total = Counter(
    "booking_conflicts_total",
    "Total booking attempts rejected because the slot was taken",
)

side_effect_failures_total = Counter(
    "booking_side_effect_failures_total",
    "Total best-effort booking side effects that failed",
    ["effect"],
)

recommendation_requests_total = Counter(
    "recommendation_requests_total",
    "Total doctor recommendation requests",
)

recommendation_catalog_failures_total = Counter(
    "recommendation_catalog_failures_total",
    "Total recommendation requests degraded because the catalog failed",
)
