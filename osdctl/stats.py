#!/usr/bin/env python3
"""
Grouped alert statistics for the report analyzer.

Alerts are counted at three levels: organization -> cluster -> alert name.
Every lookup creates the missing level, so adding a statistic cannot fail.
"""

import math
from typing import Any, Dict, List


def _percentage(count, denominator):
    """Return count as a percentage of denominator, or NaN when the denominator is zero."""
    if denominator == 0:
        return math.nan
    return count * 100 / denominator


def _select_top(stats, key, num):
    """
    Sort stats ascending by total alerts (ties by ID) and keep the last num entries.

    Values of num <= 0, or greater than the number of entries, keep everything.
    """
    ordered = sorted(stats, key=lambda s: (s.total_alerts, key(s)))
    if num <= 0 or num > len(ordered):
        return ordered
    return ordered[len(ordered) - num :]


class ClusterStats:
    """Alert counts recorded against a single cluster"""

    def __init__(self, cluster):
        self.cluster = cluster
        self.total_alerts = 0
        self.alerts: Dict[str, int] = {}

    def add_statistic(self, alert_name: str) -> None:
        self.total_alerts += 1
        self.alerts[alert_name] = self.alerts.get(alert_name, 0) + 1

    def sorted_alerts(self):
        """Return (alert name, count) pairs, most frequent first."""
        return sorted(self.alerts.items(), key=lambda item: (-item[1], item[0]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster.to_dict(),
            "totalAlerts": self.total_alerts,
            "alerts": dict(self.alerts),
        }


class OrganizationStats:
    """Alert counts recorded against the clusters of a single organization"""

    def __init__(self, organization):
        self.organization = organization
        self.total_alerts = 0
        self.clusters: Dict[str, ClusterStats] = {}

    def add_statistic(self, cluster, alert_name: str) -> None:
        self.total_alerts += 1
        cluster_stats = self.clusters.get(cluster.id)
        if cluster_stats is None:
            cluster_stats = ClusterStats(cluster)
            self.clusters[cluster.id] = cluster_stats
        cluster_stats.add_statistic(alert_name)

    def top_clusters(self, num_clusters: int) -> List[ClusterStats]:
        """Return the clusters with the most alerts, in ascending order of alerts."""
        return _select_top(self.clusters.values(), lambda c: c.cluster.id, num_clusters)

    def ranked_clusters(self, num_clusters: int = 0) -> List[ClusterStats]:
        """Return the clusters with the most alerts, most alerts first."""
        return list(reversed(self.top_clusters(num_clusters)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organization": self.organization.to_dict(),
            "totalAlerts": self.total_alerts,
            "clusters": {cluster_id: stats.to_dict() for cluster_id, stats in self.clusters.items()},
        }


class StatsAggregator:
    """
    Accumulates (organization, cluster, alert) triples and answers ranking queries.

    Attributes:
        organizations: Mapping of organization ID to OrganizationStats
        total_entries: Number of report entries seen, including skipped ones
        skipped_entries: Number of report entries which could not be analyzed
    """

    def __init__(self):
        self.organizations: Dict[str, OrganizationStats] = {}
        self.total_entries = 0
        self.skipped_entries = 0

    def record_entry(self) -> None:
        self.total_entries += 1

    def record_skipped(self) -> None:
        """Mark an already recorded entry as skipped."""
        if self.skipped_entries >= self.total_entries:
            raise ValueError("cannot skip more entries than have been recorded")
        self.skipped_entries += 1

    def add_statistic(self, organization, cluster, alert_name: str) -> None:
        """
        Count one alert for the given organization and cluster.

        Args:
            organization: Organization identity, keyed by its ``id``
            cluster: Cluster identity, keyed by its ``id``
            alert_name: Name of the alert. Not validated; an empty name is counted like any other.
        """
        org_stats = self.organizations.get(organization.id)
        if org_stats is None:
            org_stats = OrganizationStats(organization)
            self.organizations[organization.id] = org_stats
        org_stats.add_statistic(cluster, alert_name)

    def top_organizations(self, num_orgs: int) -> List[OrganizationStats]:
        """
        Return the organizations with the most alerts.

        The result is in ascending order of alerts: the last element has the most.
        Ties are ordered by organization ID. Values of num_orgs <= 0 return every organization.
        """
        return _select_top(self.organizations.values(), lambda o: o.organization.id, num_orgs)

    def ranked_organizations(self, num_orgs: int = 0) -> List[OrganizationStats]:
        """Return the same organizations as top_organizations(), most alerts first."""
        return list(reversed(self.top_organizations(num_orgs)))

    def calculate_skip_percentage(self) -> float:
        return _percentage(self.skipped_entries, self.total_entries)

    def calculate_percentage_of_total(self, count: int) -> float:
        return _percentage(count, self.total_entries)

    def calculate_percentage_of_analyzed(self, count: int) -> float:
        return _percentage(count, self.total_entries - self.skipped_entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": {
                "organizations": {org_id: stats.to_dict() for org_id, stats in self.organizations.items()},
            },
            "skippedEntries": self.skipped_entries,
            "totalEntries": self.total_entries,
        }
