"""Authorization signals for Prometheus.

- Decisions: counter of guard outcomes by deny code and allow path
- Store faults: counter of fail-closed 503s by port

Exposed at GET /metrics by the app factory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter

if TYPE_CHECKING:
    from src.authz.decision import Decision

DECISIONS_TOTAL = Counter(
    "authz_decisions_total",
    "Authorization decisions evaluated at the HTTP boundary",
    ["code", "via"],
)

STORE_FAULTS_TOTAL = Counter(
    "authz_store_faults_total",
    "Authorization checks failed closed because a store was unavailable",
    ["port"],
)


def record_decision(decision: Decision) -> None:
    via = decision.via.value if decision.via else "none"
    DECISIONS_TOTAL.labels(code=decision.code.value, via=via).inc()


def record_store_fault(port_name: str) -> None:
    STORE_FAULTS_TOTAL.labels(port=port_name).inc()
