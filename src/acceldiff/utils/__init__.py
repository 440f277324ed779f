"""
Utility modules for the comparison tool

Provides:
- logging: console/file/JSON logging setup and the ContextLogger
- retry: backoff for transient database connection errors
- tracing: OpenTelemetry spans around comparison phases
- metrics: Prometheus metrics for a comparison run
- vault_client: HashiCorp Vault integration for credentials
"""

__all__ = ["logging", "retry", "tracing", "metrics", "vault_client"]
