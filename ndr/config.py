import os

from .errors import InvalidInputError

DEFAULT_CAPACITIES = "ndrf:50,trucks:100,boats:40,helicopters:30,medical_teams:60"


def parse_capacities(raw):
    """Parse "kind:count,kind:count" into an ordered dict of capacities."""
    capacities = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        kind, sep, count = entry.partition(":")
        kind = kind.strip()
        if not sep or not kind:
            raise InvalidInputError(f"malformed capacity entry: {entry!r}")
        try:
            value = int(count)
        except ValueError:
            raise InvalidInputError(f"capacity for {kind} is not an integer: {count!r}")
        if value < 0:
            raise InvalidInputError(f"capacity for {kind} must be >= 0")
        capacities[kind] = value
    return capacities


def _flag(name, default):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Reads simulation configuration from environment variables."""

    def __init__(self):
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

        raw_seed = os.getenv("SIMULATION_SEED", "").strip()
        self.seed = int(raw_seed) if raw_seed else None
        self.simulation_duration = max(float(os.getenv("SIMULATION_DURATION", "60")), 0.0)

        # event sources
        self.base_event_interval = max(float(os.getenv("BASE_EVENT_INTERVAL", "3.0")), 0.01)
        self.min_event_interval = max(float(os.getenv("MIN_EVENT_INTERVAL", "0.2")), 0.01)
        self.max_event_interval = max(
            float(os.getenv("MAX_EVENT_INTERVAL", "60")), self.min_event_interval
        )

        # pipeline polling and backoff
        self.coordinator_poll_interval = max(float(os.getenv("COORDINATOR_POLL_INTERVAL", "1.0")), 0.01)
        self.dispatch_poll_interval = max(float(os.getenv("DISPATCH_POLL_INTERVAL", "0.5")), 0.01)
        self.allocation_retry_delay = max(float(os.getenv("ALLOCATION_RETRY_DELAY", "0.5")), 0.01)
        self.unscored_retry_delay = max(float(os.getenv("UNSCORED_RETRY_DELAY", "0.2")), 0.01)

        # simulated response
        self.response_seconds_per_severity = max(
            float(os.getenv("RESPONSE_SECONDS_PER_SEVERITY", "0.2")), 0.0
        )
        self.max_response_seconds = max(float(os.getenv("MAX_RESPONSE_SECONDS", "20")), 0.0)
        self.response_jitter_seconds = max(float(os.getenv("RESPONSE_JITTER_SECONDS", "2.0")), 0.0)
        self.request_jitter = max(int(os.getenv("REQUEST_JITTER", "1")), 0)

        # comma-separated list like "ndrf:50,boats:40"
        self.resource_capacities = parse_capacities(
            os.getenv("RESOURCE_CAPACITIES", DEFAULT_CAPACITIES)
        )

        # reporting
        self.report_interval = max(float(os.getenv("REPORT_INTERVAL", "5")), 0.5)
        self.top_pending_count = max(int(os.getenv("TOP_PENDING_COUNT", "3")), 1)

        self.regions_file = os.getenv("REGIONS_FILE", "").strip() or None

        self.status_api_enabled = _flag("STATUS_API_ENABLED", "true")
        self.http_port = int(os.getenv("HTTP_PORT", "8000"))
