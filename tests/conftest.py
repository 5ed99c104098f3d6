#!/usr/bin/env python3
"""
Shared pytest configuration and fixtures for all tests.
"""

import csv
import os
import sys
from pathlib import Path
from typing import Dict, List, Tuple
from unittest.mock import Mock

import pytest

# Add the parent directory to Python path so we can import the osdctl package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from osdctl import print_manager  # noqa: E402
from osdctl.ocm_client import Cluster, Organization  # noqa: E402

REPORT_HEADER = [
    "Incident ID",
    "Created",
    "Resolved",
    "Service",
    "Urgency",
    "Cluster ID",
    "Alert",
]


@pytest.fixture(autouse=True)
def reset_debug_mode():
    """Keep DEBUG_MODE from leaking between tests"""
    yield
    print_manager.DEBUG_MODE = False


@pytest.fixture
def mock_printer() -> Mock:
    """Mock printer for testing output operations.

    Returns:
        Mock: Mock printer instance with all required methods.
    """
    printer = Mock()
    printer.print_header = Mock()
    printer.print_info = Mock()
    printer.print_action = Mock()
    printer.print_success = Mock()
    printer.print_error = Mock()
    printer.print_warning = Mock()
    printer.print_line = Mock()
    printer.print_table = Mock()
    return printer


@pytest.fixture
def org_a() -> Organization:
    return Organization("org-a", "Acme Corp", "ebs-1001")


@pytest.fixture
def org_b() -> Organization:
    return Organization("org-b", "Globex", "ebs-2002")


@pytest.fixture
def cluster_x() -> Cluster:
    return Cluster("cluster-x", "acme-prod", "ext-x", "sub-x")


@pytest.fixture
def cluster_y() -> Cluster:
    return Cluster("cluster-y", "acme-stage", "ext-y", "sub-y")


@pytest.fixture
def cluster_z() -> Cluster:
    return Cluster("cluster-z", "globex-prod", "ext-z", "sub-z")


@pytest.fixture
def report_writer(tmp_path):
    """Factory fixture writing a weekly report .csv file.

    Returns:
        Callable taking a list of (cluster ID, alert) pairs or raw rows and returning the file path.
    """

    def _write_report(entries: List, header: List[str] = None, name: str = "report.csv") -> str:
        path = tmp_path / name
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            if header is not False:
                writer.writerow(header or REPORT_HEADER)
            for index, entry in enumerate(entries):
                if isinstance(entry, tuple):
                    cluster_id, alert = entry
                    writer.writerow([f"PD{index}", "2024-03-01", "2024-03-01", "osd", "high", cluster_id, alert])
                else:
                    writer.writerow(entry)
        return str(path)

    return _write_report


@pytest.fixture
def fake_ocm_client():
    """Factory fixture building a mock OcmClient from a cluster ownership table.

    Args (of the returned callable):
        ownership: Mapping of cluster ID to (Organization, Cluster)

    Unknown cluster IDs raise LookupError like the real client.
    """

    def _build(ownership: Dict[str, Tuple[Organization, Cluster]]) -> Mock:
        clusters = {cluster_id: cluster for cluster_id, (_, cluster) in ownership.items()}
        orgs_by_cluster = {cluster.id: org for org, cluster in ownership.values()}
        orgs_by_id = {org.id: org for org, _ in ownership.values()}

        def _get_cluster(cluster_key):
            if cluster_key not in clusters:
                raise LookupError(f"expected exactly one cluster matching '{cluster_key}', found 0")
            return clusters[cluster_key]

        def _get_org_id(cluster):
            return orgs_by_cluster[cluster.id].id

        def _get_org(org_id):
            return orgs_by_id[org_id]

        client = Mock()
        client.get_cluster = Mock(side_effect=_get_cluster)
        client.get_org_id_from_cluster = Mock(side_effect=_get_org_id)
        client.get_org_from_id = Mock(side_effect=_get_org)
        return client

    return _build


@pytest.fixture
def saas_file_factory(tmp_path):
    """Factory fixture creating an app-interface tree with SAAS files.

    Returns:
        Callable taking (relative path, content) and returning the absolute path of the written file.
    """

    def _create(relative_path: str, content: str = "") -> str:
        path = Path(tmp_path) / "app-interface" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return str(path)

    return _create
