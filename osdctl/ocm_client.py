#!/usr/bin/env python3
"""OCM client module for the osdctl operator tools."""

from typing import Any, Dict, List, Optional

from .utilities import execute_ocm_command, get_printer

CLUSTERS_API = "/api/clusters_mgmt/v1/clusters"
SUBSCRIPTIONS_API = "/api/accounts_mgmt/v1/subscriptions"
ORGANIZATIONS_API = "/api/accounts_mgmt/v1/organizations"
SERVICE_LOGS_API = "/api/service_logs/v1/cluster_logs"


class Organization:
    """Identity of an OCM organization"""

    def __init__(self, org_id: str, name: str = "", ebs_account_id: str = "") -> None:
        self.id = org_id
        self.name = name
        self.ebs_account_id = ebs_account_id

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Organization":
        if not data.get("id"):
            raise LookupError("organization response has no ID")
        return cls(data["id"], data.get("name") or "", data.get("ebs_account_id") or "")

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "ebsAccountId": self.ebs_account_id}

    def __eq__(self, other):
        return isinstance(other, Organization) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Organization(id={self.id!r}, name={self.name!r})"


class Cluster:
    """Identity of an OCM cluster"""

    def __init__(self, cluster_id: str, name: str = "", external_id: str = "", subscription_id: str = "") -> None:
        self.id = cluster_id
        self.name = name
        self.external_id = external_id
        self.subscription_id = subscription_id

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Cluster":
        if not data.get("id"):
            raise LookupError("cluster response has no ID")
        return cls(
            data["id"],
            data.get("name") or "",
            data.get("external_id") or "",
            (data.get("subscription") or {}).get("id") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}

    def __eq__(self, other):
        return (
            isinstance(other, Cluster)
            and self.id == other.id
            and self.name == other.name
            and self.external_id == other.external_id
            and self.subscription_id == other.subscription_id
        )

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Cluster(id={self.id!r}, name={self.name!r})"


class OcmClient:
    """Looks up clusters, organizations and service logs through the ocm CLI"""

    def __init__(self, execute_ocm_command=execute_ocm_command, printer=None):
        """
        Initialize OcmClient

        Args:
            execute_ocm_command: Function running 'ocm' subcommands and returning parsed JSON
            printer: Printer instance for output
        """
        self.execute_ocm_command = execute_ocm_command
        self.printer = get_printer(printer)

    def _get(self, path: str, parameters: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        command = ["get", path]
        for key, value in (parameters or {}).items():
            command += ["--parameter", f"{key}={value}"]
        response = self.execute_ocm_command(command, printer=self.printer)
        if response is None:
            raise LookupError(f"request to '{path}' failed")
        return response

    def get_cluster(self, cluster_key: str) -> Cluster:
        """
        Find the single cluster whose ID, name or external ID equals cluster_key.

        Raises:
            LookupError: If the request fails or the key does not match exactly one cluster
        """
        search = f"id = '{cluster_key}' or name = '{cluster_key}' or external_id = '{cluster_key}'"
        response = self._get(CLUSTERS_API, {"search": search})
        items = response.get("items") or []
        if len(items) != 1:
            raise LookupError(f"expected exactly one cluster matching '{cluster_key}', found {len(items)}")
        return Cluster.from_api(items[0])

    def get_clusters(self, cluster_keys: List[str]) -> List[Cluster]:
        return [self.get_cluster(key) for key in cluster_keys]

    def get_org_id_from_cluster(self, cluster: Cluster) -> str:
        """Return the ID of the organization owning the cluster's subscription."""
        if not cluster.subscription_id:
            raise LookupError(f"cluster '{cluster.id}' has no subscription")
        subscription = self._get(f"{SUBSCRIPTIONS_API}/{cluster.subscription_id}")
        org_id = subscription.get("organization_id")
        if not org_id:
            raise LookupError(f"subscription '{cluster.subscription_id}' has no organization")
        return org_id

    def get_org_from_id(self, org_id: str) -> Organization:
        return Organization.from_api(self._get(f"{ORGANIZATIONS_API}/{org_id}"))

    def get_limited_support_reasons(self, cluster_id: str) -> List[Dict[str, Any]]:
        response = self._get(f"{CLUSTERS_API}/{cluster_id}/limited_support_reasons")
        return response.get("items") or []

    def get_service_logs(self, cluster: Cluster) -> List[Dict[str, Any]]:
        response = self._get(SERVICE_LOGS_API, {"search": f"cluster_uuid = '{cluster.external_id}'"})
        return response.get("items") or []
