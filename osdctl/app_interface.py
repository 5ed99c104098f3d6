#!/usr/bin/env python3
"""App-interface module: git operations against a local checkout of the app-interface repository."""

import os

import yaml

from .utilities import execute_git_command, get_printer

APP_INTERFACE_REMOTE_MARKERS = ("gitlab.cee.redhat.com", "app-interface")

# Namespace markers identifying the production target of a SAAS file
CAD_PRODUCTION_NAMESPACE = "configuration-anomaly-detection-production"
RHOBS_PRODUCTION_NAMESPACE = "rhobsp02ue1-production"
DEFAULT_PRODUCTION_NAMESPACE = "hivep"


def _production_namespace_for(service_name):
    if "configuration-anomaly-detection" in service_name:
        return CAD_PRODUCTION_NAMESPACE
    if "rhobs-rules-and-dashboards" in service_name:
        return RHOBS_PRODUCTION_NAMESPACE
    return DEFAULT_PRODUCTION_NAMESPACE


def get_current_git_hash(saas_yaml, service_name):
    """
    Find the git ref currently deployed to production and the service repository URL.

    Args:
        saas_yaml: Contents of the service's SAAS file
        service_name: Name of the service, used in error messages

    Returns:
        tuple: (current git hash, service repository URL)

    Raises:
        ValueError: If the file is not valid YAML, or has no production target or repository URL
    """
    try:
        service = yaml.safe_load(saas_yaml) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"failed to parse SAAS file for service {service_name}: {e}") from None
    if not isinstance(service, dict):
        raise ValueError(f"failed to parse SAAS file for service {service_name}: expected a mapping")

    resource_templates = service.get("resourceTemplates") or []
    if not isinstance(resource_templates, list) or not all(isinstance(t, dict) for t in resource_templates):
        raise ValueError(f"failed to parse SAAS file for service {service_name}: malformed resourceTemplates")
    production_namespace = _production_namespace_for(service.get("name", ""))

    # A matching target in a later resource template overrides earlier ones.
    current_git_hash = ""
    for resource_template in resource_templates:
        for target in resource_template.get("targets") or []:
            if not isinstance(target, dict):
                continue
            namespace = target.get("namespace") or {}
            namespace_ref = (namespace.get("$ref") or "") if isinstance(namespace, dict) else ""
            if production_namespace in namespace_ref:
                current_git_hash = target.get("ref") or ""
                break

    if not current_git_hash:
        raise ValueError(f"production namespace not found for service {service_name}")

    service_repo = resource_templates[0].get("url", "") if resource_templates else ""
    if not service_repo:
        raise ValueError(f"service repo not found for service {service_name}")

    return current_git_hash, service_repo


class AppInterface:
    """A local checkout of app-interface. All git commands run inside base_dir."""

    def __init__(self, base_dir=None, execute_git_command=execute_git_command, printer=None):
        """
        Initialize AppInterface

        Args:
            base_dir: Path to the app-interface checkout. Defaults to the current working directory.
            execute_git_command: Function running git subcommands in a directory
            printer: Printer instance for output
        """
        self.base_dir = os.path.abspath(base_dir or os.getcwd())
        self.execute_git_command = execute_git_command
        self.printer = get_printer(printer)

    def _git(self, command, error_message):
        output = self.execute_git_command(command, cwd=self.base_dir, printer=self.printer)
        if output is None:
            raise RuntimeError(error_message)
        return output

    def bootstrap(self):
        """
        Verify the checkout is usable for promotions.

        Raises:
            RuntimeError: If base_dir is not an up to date app-interface master checkout
        """
        self.check_app_interface_checkout()
        self.check_behind_master()

    def check_app_interface_checkout(self):
        """Check that base_dir is a checkout of app-interface."""
        remotes = self._git(["remote", "-v"], f"failed to read git remotes in '{self.base_dir}'")
        if not any(marker in remotes for marker in APP_INTERFACE_REMOTE_MARKERS):
            raise RuntimeError("not running in checkout of app-interface")
        self.printer.print_info("Running in checkout of app-interface.")

    def check_behind_master(self):
        """Check that the checkout is on 'master' and not behind 'upstream/master'."""
        self.printer.print_header("Checking 'master' branch is up to date")

        branch = self._git(["rev-parse", "--abbrev-ref", "HEAD"], "failed to retrieve current branch")
        if branch != "master":
            raise RuntimeError("you are not on the 'master' branch")

        self._git(["fetch", "upstream"], "failed to fetch 'upstream' remote")

        behind_count = self._git(
            ["rev-list", "--count", "HEAD..upstream/master"], "failed to compare 'master' with 'upstream/master'"
        )
        if behind_count != "0":
            raise RuntimeError(f"you are behind 'master' by this many commits: {behind_count}")

        self.printer.print_success("'master' branch is up to date")

    def update_and_commit(self, service_name, saas_file, current_git_hash, promotion_git_hash):
        """
        Create a promotion branch that replaces the current git hash in the SAAS file.

        Args:
            service_name: Service being promoted
            saas_file: Path to the service's SAAS file
            current_git_hash: Git hash currently deployed
            promotion_git_hash: Git hash being promoted

        Returns:
            str: Name of the created branch

        Raises:
            RuntimeError: If any git operation fails
            OSError: If the SAAS file cannot be read or written
        """
        branch_name = f"promote-{service_name}-{promotion_git_hash}"
        self._git(["checkout", "-b", branch_name, "master"], f"failed to create branch {branch_name}")

        with open(saas_file, "r") as f:
            content = f.read()
        with open(saas_file, "w") as f:
            f.write(content.replace(current_git_hash, promotion_git_hash))

        self._git(["add", saas_file], f"failed to add file {saas_file}")

        commit_message = f"Promote {service_name} to {promotion_git_hash}"
        self._git(["commit", "-m", commit_message], "failed to commit changes")

        self.printer.print_success(f"The branch {branch_name} is ready to be pushed")
        self.printer.print_line("")
        self.printer.print_line(f"service: {service_name}")
        self.printer.print_line(f"from: {current_git_hash}")
        self.printer.print_line(f"to: {promotion_git_hash}")
        self.printer.print_line(f"READY TO PUSH, {service_name} promotion commit is ready locally")

        return branch_name
