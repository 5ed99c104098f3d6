#!/usr/bin/env python3
"""Summary Renderer module for the report analyzer."""

import json
import math
from enum import Enum

import yaml

from .utilities import get_printer

# Skip percentage above which the results are flagged as unreliable
HIGH_SKIP_PERCENTAGE = 30.0


class OutputFormat(Enum):
    """Supported '--output/-o' values"""

    SHORT = "short"
    LONG = "long"
    YAML = "yaml"
    JSON = "json"

    @classmethod
    def parse(cls, value):
        """
        Convert a '--output/-o' value to an OutputFormat

        Raises:
            ValueError: If the value is not a supported format
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                "invalid output format provided with '--output/-o'. "
                "Valid options are one of 'short', 'long', 'yaml', or 'json'"
            ) from None


class SummaryRenderer:
    """Prints the statistics gathered by a StatsAggregator"""

    def __init__(self, aggregator, printer=None):
        self.aggregator = aggregator
        self.printer = get_printer(printer)

    def render(self, output_format, num_orgs=5):
        """
        Print the summary in the requested format.

        Args:
            output_format: OutputFormat to render
            num_orgs: Number of organizations shown by 'short' and 'long'. Values <= 0 show all.
                      'yaml' and 'json' always contain the full analysis.
        """
        if output_format is OutputFormat.YAML:
            self.print_yaml_summary()
        elif output_format is OutputFormat.JSON:
            self.print_json_summary()
        elif output_format is OutputFormat.SHORT:
            self.print_short_summary(num_orgs)
        elif output_format is OutputFormat.LONG:
            self.print_long_summary(num_orgs)
        else:
            raise ValueError(f"Invalid output format requested: {output_format}")

    def _print_results_header(self):
        self.printer.print_header("Results")

        stats = self.aggregator
        if stats.total_entries == 0:
            self.printer.print_line("No report entries were analyzed")
            return

        skip_percentage = stats.calculate_skip_percentage()
        self.printer.print_line(
            f"{stats.skipped_entries} out of {stats.total_entries} total entries "
            f"({skip_percentage:.2f} percent) were skipped"
        )
        if skip_percentage > HIGH_SKIP_PERCENTAGE:
            self.printer.print_warning("High skip percentage detected: results may be skewed")

    def _format_percentage(self, value):
        if math.isnan(value):
            return "n/a"
        return f"{value:.2f}"

    def print_short_summary(self, num_orgs):
        self._print_results_header()
        for org_stats in self.aggregator.ranked_organizations(num_orgs):
            org = org_stats.organization
            self.printer.print_line(f"Organization: {org.name} [{org.id}]")
            self.printer.print_line(
                f"\tTotal Alerts: {org_stats.total_alerts} across {len(org_stats.clusters)} cluster(s)\n"
            )

    def print_long_summary(self, num_orgs):
        self._print_results_header()
        stats = self.aggregator
        pct = self._format_percentage
        for org_stats in stats.ranked_organizations(num_orgs):
            org = org_stats.organization
            self.printer.print_line(f"Organization: {org.name} [{org.id}]")
            self.printer.print_line(f"\tEBS Account ID: {org.ebs_account_id}")
            self.printer.print_line(
                f"\tTotal Alerts: {org_stats.total_alerts} across {len(org_stats.clusters)} cluster(s)"
            )
            self.printer.print_line(
                f"\t- {pct(stats.calculate_percentage_of_total(org_stats.total_alerts))} percent of all alerts"
            )
            self.printer.print_line(
                f"\t- {pct(stats.calculate_percentage_of_analyzed(org_stats.total_alerts))} "
                "percent of analyzed (not skipped) alerts"
            )
            self.printer.print_line("\tClusters:")
            for cluster_stats in org_stats.ranked_clusters():
                cluster = cluster_stats.cluster
                self.printer.print_line(f"\t- {cluster.name} // {cluster.id}")
                self.printer.print_line(
                    f"\t  {cluster_stats.total_alerts} alerts across {len(cluster_stats.alerts)} symptoms"
                )
                self.printer.print_line(
                    f"\t\t* {pct(stats.calculate_percentage_of_total(cluster_stats.total_alerts))} "
                    "percent of all alerts"
                )
                self.printer.print_line(
                    f"\t\t* {pct(stats.calculate_percentage_of_analyzed(cluster_stats.total_alerts))} "
                    "percent of analyzed (not skipped) alerts"
                )
                self.printer.print_line("\t  Alerts:")
                for alert, count in cluster_stats.sorted_alerts():
                    self.printer.print_line(f"\t\t* {alert} -- {count}")
            self.printer.print_line("")

    def print_yaml_summary(self):
        self.printer.print_line(yaml.safe_dump(self.aggregator.to_dict(), default_flow_style=False, sort_keys=False))

    def print_json_summary(self):
        self.printer.print_line(json.dumps(self.aggregator.to_dict()))
