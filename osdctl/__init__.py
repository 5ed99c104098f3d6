#!/usr/bin/env python3
"""
osdctl - Operator tools for OpenShift Dedicated.

This package contains the modular components of the osdctl operator tools,
broken down into logical modules for better maintainability and testing.

Modules:
- print_manager: Handles all output formatting and printing
- arguments_parser: Command-line argument parsing
- utilities: Retrying wrappers around the ocm and git command line tools
- ocm_client: Cluster, organization and service log lookups in OCM
- stats: Organization -> cluster -> alert statistics aggregation
- report_analyzer: Weekly report ingestion and analysis by organization
- summary_renderer: Short, long, YAML and JSON report summaries
- app_interface: Git operations on a local app-interface checkout
- saas_promoter: SaaS service and package promotions
- cluster_context: Support status and service logs of a cluster
"""

from .arguments_parser import ArgumentsParser
from .print_manager import PrintManager, printer, DEBUG_MODE
from .utilities import (
    execute_command,
    execute_ocm_command,
    execute_git_command,
    format_runtime,
)
from .ocm_client import Cluster, Organization, OcmClient
from .stats import ClusterStats, OrganizationStats, StatsAggregator
from .summary_renderer import OutputFormat, SummaryRenderer
from .report_analyzer import OrgAnalyzer, run_org_analysis
from .app_interface import AppInterface, get_current_git_hash
from .saas_promoter import SaasPromoter, run_saas_promotion, run_package_promotion
from .cluster_context import ClusterContext, run_cluster_context

__all__ = [
    "ArgumentsParser",
    "PrintManager",
    "printer",
    "DEBUG_MODE",
    "execute_command",
    "execute_ocm_command",
    "execute_git_command",
    "format_runtime",
    "Cluster",
    "Organization",
    "OcmClient",
    "ClusterStats",
    "OrganizationStats",
    "StatsAggregator",
    "OutputFormat",
    "SummaryRenderer",
    "OrgAnalyzer",
    "run_org_analysis",
    "AppInterface",
    "get_current_git_hash",
    "SaasPromoter",
    "run_saas_promotion",
    "run_package_promotion",
    "ClusterContext",
    "run_cluster_context",
]
