#!/usr/bin/env python3
"""Cluster Context module: support status and recent service logs of a cluster."""

import json
from datetime import datetime, timedelta, timezone

from .ocm_client import OcmClient
from .utilities import get_printer

ERROR_SEVERITY = "Error"


def _parse_timestamp(value):
    """Parse an OCM timestamp such as '2024-03-01T10:00:00.123Z' into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def filter_error_service_logs(service_logs, days, now=None):
    """
    Keep the Error severity service logs sent in the past number of days.

    Logs without a parsable 'created_at' are dropped.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    error_logs = []
    for service_log in service_logs:
        if service_log.get("severity") != ERROR_SEVERITY:
            continue
        try:
            created_at = _parse_timestamp(service_log.get("created_at") or "")
        except ValueError:
            continue
        if created_at < cutoff:
            continue
        error_logs.append(service_log)
    return error_logs


class ClusterContext:
    """Shows the context of a single cluster"""

    def __init__(self, days=30, verbose=False, ocm_client=None, printer=None):
        self.days = days
        self.verbose = verbose
        self.printer = get_printer(printer)
        self.ocm_client = ocm_client if ocm_client is not None else OcmClient(printer=self.printer)
        self.cluster = None

    def complete(self, cluster_key):
        """
        Validate options and resolve the cluster.

        Raises:
            ValueError: If days is lower than 1
            LookupError: If cluster_key does not match exactly one cluster
        """
        if self.days < 1:
            raise ValueError("Cannot have a days value lower than 1")
        self.cluster = self.ocm_client.get_cluster(cluster_key)
        return self.cluster

    def run(self):
        self.print_support_status()
        self.print_service_logs()

    def print_support_status(self):
        """Report whether the cluster is in limited support or fully supported."""
        reasons = self.ocm_client.get_limited_support_reasons(self.cluster.id)

        self.printer.print_header("Limited Support Status")
        if not reasons:
            self.printer.print_line("Cluster is fully supported")
            return

        rows = [["Reason ID", "Summary", "Details"]]
        for reason in reasons:
            rows.append([reason.get("id", ""), reason.get("summary", ""), reason.get("details", "")])
        self.printer.print_table(rows)
        self.printer.print_line("")

    def print_service_logs(self):
        service_logs = self.ocm_client.get_service_logs(self.cluster)
        error_logs = filter_error_service_logs(service_logs, self.days)

        self.printer.print_header(f"Service Logs with Error Severity sent in the past {self.days} Days")
        if self.verbose:
            self.printer.print_line(json.dumps(error_logs, indent=2))
            return
        for index, service_log in enumerate(error_logs):
            self.printer.print_line(f"{index}. {service_log.get('summary', '')}")


def run_cluster_context(args, printer=None, ocm_client=None):
    """
    Entry point for 'cluster context'.

    Returns:
        int: Process exit code
    """
    printer = get_printer(printer)
    context = ClusterContext(days=args.days, verbose=args.verbose, ocm_client=ocm_client, printer=printer)
    try:
        context.complete(args.cluster_id)
        context.run()
    except ValueError as e:
        printer.print_error(str(e))
        return 1
    except LookupError as e:
        printer.print_error(f"Can't retrieve cluster context: {e}")
        return 1
    return 0
