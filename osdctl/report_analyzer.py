#!/usr/bin/env python3
"""Report Analyzer module: noise analysis of the SRE weekly report by organization."""

import csv
import io
import re

from .ocm_client import OcmClient
from .stats import StatsAggregator
from .summary_renderer import OutputFormat, SummaryRenderer
from .utilities import get_printer

# Column positions in the 'Incident's Details' export
CLUSTER_ID_COLUMN = 5
ALERT_COLUMN = 6


class OrgAnalyzer:
    """Ingests a weekly report and aggregates its alerts per organization and cluster"""

    def __init__(self, output="long", num_orgs=5, search="", ocm_client=None, printer=None):
        """
        Initialize OrgAnalyzer

        Args:
            output: One of 'short', 'long', 'yaml' or 'json'
            num_orgs: Number of organizations displayed by 'short' and 'long'. Values <= 0 display all.
            search: Optional regular expression. Only organizations whose name or ID matches are analyzed.
            ocm_client: OcmClient used to resolve clusters and organizations
            printer: Printer instance for output
        """
        self.output = output
        self.num_orgs = num_orgs
        self.search = search
        self.printer = get_printer(printer)
        self.ocm_client = ocm_client if ocm_client is not None else OcmClient(printer=self.printer)
        self.stats = StatsAggregator()
        self._search_pattern = None
        self._identity_cache = {}

    def validate(self):
        """
        Check the analyzer options before any entry is read.

        Raises:
            ValueError: If the output format or the search pattern is invalid
        """
        output_format = OutputFormat.parse(self.output)
        if self.search:
            try:
                self._search_pattern = re.compile(self.search)
            except re.error as e:
                raise ValueError(f"invalid search pattern '{self.search}': {e}") from None
        return output_format

    def open_report(self, report_file_path):
        """Read the whole report up front so the file does not stay open while entries are resolved."""
        with open(report_file_path, "r", newline="", encoding="utf-8", errors="replace") as f:
            data = f.read()
        return csv.reader(io.StringIO(data))

    def parse_entry(self, entry):
        """Return the (cluster ID, alert) pair of a report entry."""
        return entry[CLUSTER_ID_COLUMN], entry[ALERT_COLUMN]

    def _skip(self, message):
        self.printer.print_error(f"{message}. Skipping.")
        self.stats.record_skipped()

    def _resolve(self, cluster_id):
        """
        Resolve a cluster identifier to its (organization, cluster) identities.

        Results, including failures, are cached for the lifetime of the analyzer.

        Raises:
            LookupError: If the cluster or its organization cannot be retrieved from OCM
        """
        if cluster_id not in self._identity_cache:
            try:
                cluster = self.ocm_client.get_cluster(cluster_id)
            except LookupError as e:
                self._identity_cache[cluster_id] = LookupError(
                    f"failed to retrieve cluster '{cluster_id}' from OCM: {e}"
                )
            else:
                try:
                    org_id = self.ocm_client.get_org_id_from_cluster(cluster)
                    org = self.ocm_client.get_org_from_id(org_id)
                except LookupError as e:
                    self._identity_cache[cluster_id] = LookupError(
                        f"failed to retrieve organization for cluster '{cluster.id}' from OCM: {e}"
                    )
                else:
                    self._identity_cache[cluster_id] = (org, cluster)

        resolved = self._identity_cache[cluster_id]
        if isinstance(resolved, LookupError):
            raise resolved
        return resolved

    def _matches_search(self, org):
        """
        Return True if the organization's name or ID matches the search pattern.

        Raises:
            TypeError: If the organization's name or ID cannot be searched
        """
        if self._search_pattern is None:
            return True
        return bool(self._search_pattern.search(org.name) or self._search_pattern.search(org.id))

    def analyze(self, report_file_path):
        """
        Ingest the report, adding its entries to the analyzer's statistics.

        Entries which cannot be parsed or resolved are counted as skipped. Entries belonging to
        organizations that do not match the search pattern are ignored without being skipped.

        Args:
            report_file_path: Path to the report .csv file
        """
        if self.search and self._search_pattern is None:
            self.validate()

        report = self.open_report(report_file_path)

        try:
            header = next(report)
        except StopIteration:
            self.printer.print_error(f"failed to read header entry: report '{report_file_path}' is empty")
            return
        except csv.Error as e:
            self.printer.print_error(f"failed to read header entry: {e}")
            header = None

        while True:
            try:
                entry = next(report)
            except StopIteration:
                break
            except csv.Error as e:
                self.stats.record_entry()
                self._skip(f"failed to read entry: {e}")
                continue

            self.stats.record_entry()
            if header is not None and len(entry) != len(header):
                self._skip(
                    f"failed to read entry on line {report.line_num}: "
                    f"expected {len(header)} fields, found {len(entry)}"
                )
                continue
            if len(entry) <= ALERT_COLUMN:
                self._skip(f"failed to read entry on line {report.line_num}: too few fields ({len(entry)})")
                continue

            cluster_id, alert = self.parse_entry(entry)
            try:
                org, cluster = self._resolve(cluster_id)
            except LookupError as e:
                self._skip(str(e))
                continue

            try:
                matched = self._matches_search(org)
            except TypeError as e:
                self._skip(
                    f"failed to compare organization '{org.id}' to provided search string '{self.search}': {e}"
                )
                continue
            if not matched:
                # The organization was deliberately excluded, so this is not a skipped entry
                continue

            self.stats.add_statistic(org, cluster, alert)

        self.printer.print_action(
            f"Analyzed {self.stats.total_entries} entries from '{report_file_path}', "
            f"{self.stats.skipped_entries} skipped"
        )

    def summarize(self):
        """Print the analysis in the format selected by the analyzer's output option."""
        output_format = OutputFormat.parse(self.output)
        SummaryRenderer(self.stats, printer=self.printer).render(output_format, num_orgs=self.num_orgs)


def run_org_analysis(args, printer=None, ocm_client=None):
    """
    Entry point for 'report analyze org'.

    Args:
        args: Parsed arguments with report_file, output, number and search
        printer: Printer instance for output
        ocm_client: Optional OcmClient override

    Returns:
        int: Process exit code
    """
    printer = get_printer(printer)
    analyzer = OrgAnalyzer(
        output=args.output,
        num_orgs=args.number,
        search=args.search,
        ocm_client=ocm_client,
        printer=printer,
    )
    try:
        analyzer.validate()
    except ValueError as e:
        printer.print_error(f"invalid argument provided: {e}")
        return 1

    try:
        analyzer.analyze(args.report_file)
    except OSError as e:
        printer.print_error(f"encountered unrecoverable error while analyzing file '{args.report_file}': {e}")
        return 1

    analyzer.summarize()
    return 0
