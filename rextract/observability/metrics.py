"""Prometheus metrics for rextract.

Tracks resend decisions, dependency send latency, extraction outcomes,
and body decode fallbacks.
"""

from prometheus_client import Counter, Histogram

# Resend metrics
RESEND_DECISIONS = Counter(
    "rextract_resend_decisions_total",
    "Resend decisions taken for dependency requests",
    labelnames=["policy", "outcome"],
)

DEPENDENCY_SEND_LATENCY = Histogram(
    "rextract_dependency_send_latency_seconds",
    "Latency of dependency request executions in seconds",
    labelnames=["policy"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Extraction metrics
EXTRACTIONS = Counter(
    "rextract_extractions_total",
    "Directive evaluations by final status",
    labelnames=["status"],
)

DECODE_FALLBACKS = Counter(
    "rextract_decode_fallbacks_total",
    "Response bodies that could not be decoded with their declared charset",
    labelnames=["charset"],
)
