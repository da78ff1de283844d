"""Database provisioning for vendor timelines."""
from __future__ import annotations

from provisioning.provisioner import (
    ProvisionResult,
    check_database,
    provision,
    run_provisioning,
)
from provisioning.retry import DEFAULT_RETRY_POLICY, RetryPolicy, connect_with_retry
from provisioning.schema import SchemaResult, create_schema
from provisioning.seed import SEED_TIMELINES, SeedResult, seed_timelines

__version__ = "1.0.0"

__all__ = [
    "ProvisionResult",
    "provision",
    "check_database",
    "run_provisioning",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "connect_with_retry",
    "SchemaResult",
    "create_schema",
    "SeedResult",
    "seed_timelines",
    "SEED_TIMELINES",
]
