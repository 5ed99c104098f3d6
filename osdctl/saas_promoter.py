#!/usr/bin/env python3
"""SAAS Promoter module: promotes SaaS services/operators and package-operator packages."""

import glob
import os
import tempfile

from .app_interface import AppInterface, get_current_git_hash
from .utilities import execute_git_command, get_printer

OSD_SAAS_DIR = "data/services/osd-operators/cicd/saas"
BP_SAAS_DIR = "data/services/backplane/cicd/saas"
CAD_SAAS_DIR = "data/services/configuration-anomaly-detection/cicd"
SAAS_DIRS = (OSD_SAAS_DIR, BP_SAAS_DIR, CAD_SAAS_DIR)

DEFAULT_PROMOTION_BRANCH = "master"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NOTHING_TO_PROMOTE = 6


def _service_name_from_path(path):
    name = os.path.basename(path)
    if name.endswith(".yaml"):
        name = name[: -len(".yaml")]
    return name


class SaasPromoter:
    """Finds SAAS files in app-interface and prepares promotion commits for them"""

    def __init__(self, app_interface, execute_git_command=execute_git_command, printer=None):
        """
        Initialize SaasPromoter

        Args:
            app_interface: AppInterface wrapping the local app-interface checkout
            execute_git_command: Function running git subcommands, used against service repositories
            printer: Printer instance for output
        """
        self.app_interface = app_interface
        self.execute_git_command = execute_git_command
        self.printer = get_printer(printer)

    def _saas_paths(self, saas_dirs):
        for saas_dir in saas_dirs:
            pattern = os.path.join(self.app_interface.base_dir, saas_dir, "saas-*")
            yield from sorted(glob.glob(pattern))

    def get_service_names(self, *saas_dirs):
        """Return the sorted names of all services found in the given SAAS directories."""
        return sorted(_service_name_from_path(path) for path in self._saas_paths(saas_dirs or SAAS_DIRS))

    def get_service_files(self, *saas_dirs):
        """Return a mapping of service name to SAAS file or directory path."""
        return {_service_name_from_path(path): path for path in self._saas_paths(saas_dirs or SAAS_DIRS)}

    def list_service_names(self):
        self.printer.print_header("Available service names")
        for service in self.get_service_names():
            self.printer.print_line(service)

    def validate_service_name(self, services, service_name):
        """
        Raises:
            ValueError: If service_name is not one of services
        """
        self.printer.print_info(f"Checking if service {service_name} exists")
        if service_name not in services:
            raise ValueError(f"service {service_name} not found")
        self.printer.print_success(f"Service {service_name} found")

    def get_saas_file(self, service_name, osd, hcp):
        """
        Resolve the SAAS file used to promote a service.

        Single-file services are OSD only. Progressive delivery services are directories holding
        'deploy.yaml' (OSD) and 'hypershift-deploy.yaml' (HCP).

        Raises:
            ValueError: If no SAAS file matches the service and target
        """
        saas_path = self.get_service_files().get(service_name)
        if saas_path is not None:
            if saas_path.endswith(".yaml"):
                if osd:
                    return saas_path
            elif osd:
                return os.path.join(saas_path, "deploy.yaml")
            elif hcp:
                return os.path.join(saas_path, "hypershift-deploy.yaml")

        raise ValueError(f"saas directory for service {service_name} not found")

    def checkout_and_compare_git_hash(self, service_repo, git_hash, current_git_hash):
        """
        Resolve the git hash to promote in the service repository.

        Args:
            service_repo: URL of the service repository
            git_hash: Requested hash. Empty means the HEAD of master.
            current_git_hash: Hash currently deployed to production

        Returns:
            str: Full hash to promote, or an empty string when it is already deployed

        Raises:
            RuntimeError: If the repository cannot be cloned or the hash cannot be resolved
        """
        with tempfile.TemporaryDirectory(prefix="osdctl-promote-") as repo_dir:
            self.printer.print_info(f"Cloning {service_repo}")
            if self.execute_git_command(["clone", "--quiet", service_repo, repo_dir], printer=self.printer) is None:
                raise RuntimeError(f"failed to clone service repository {service_repo}")

            target = git_hash or DEFAULT_PROMOTION_BRANCH
            promotion_git_hash = self.execute_git_command(
                ["rev-parse", "--verify", f"{target}^{{commit}}"], cwd=repo_dir, printer=self.printer
            )
            if not promotion_git_hash:
                raise RuntimeError(f"failed to resolve '{target}' in {service_repo}")

            deployed = self.execute_git_command(
                ["rev-parse", "--verify", f"{current_git_hash}^{{commit}}"], cwd=repo_dir, printer=self.printer
            )
            if promotion_git_hash in (current_git_hash, deployed):
                self.printer.print_warning(f"{promotion_git_hash} is already deployed to production")
                return ""

            if deployed:
                changes = self.execute_git_command(
                    ["log", "--oneline", f"{deployed}..{promotion_git_hash}"], cwd=repo_dir, printer=self.printer
                )
                if changes:
                    self.printer.print_header("Changes being promoted")
                    self.printer.print_line(changes)
            else:
                self.printer.print_warning(f"current hash {current_git_hash} was not found in {service_repo}")

        return promotion_git_hash

    def promote(self, service_name, git_hash, osd, hcp):
        """
        Promote a service to git_hash (or the HEAD of master).

        Returns:
            int: Process exit code
        """
        self.validate_service_name(self.get_service_names(), service_name)

        saas_file = self.get_saas_file(service_name, osd, hcp)
        self.printer.print_info(f"SAAS Directory: {saas_file}")

        with open(saas_file, "r") as f:
            service_data = f.read()

        current_git_hash, service_repo = get_current_git_hash(service_data, service_name)
        self.printer.print_info(f"Current Git Hash: {current_git_hash}")
        self.printer.print_info(f"Git Repo: {service_repo}")

        promotion_git_hash = self.checkout_and_compare_git_hash(service_repo, git_hash, current_git_hash)
        if not promotion_git_hash:
            self.printer.print_warning("Unable to find a git hash to promote. Exiting.")
            return EXIT_NOTHING_TO_PROMOTE
        self.printer.print_info(f"Service: {service_name} will be promoted to {promotion_git_hash}")

        self.app_interface.update_and_commit(service_name, saas_file, current_git_hash, promotion_git_hash)
        return EXIT_SUCCESS


def _print_saas_usage(printer):
    printer.print_info("For SaaS services/operators, please provide --serviceName and --gitHash")
    printer.print_info("--serviceName is the name of the service, i.e. saas-managed-cluster-config")
    printer.print_info("--gitHash is the target git commit in the service, if not specified defaults to HEAD of master")


def validate_saas_options(args):
    """
    Check the 'promote saas' flag combinations.

    Raises:
        ValueError: If the flags cannot be combined
    """
    if args.list:
        if args.serviceName or args.gitHash or args.osd or args.hcp:
            raise ValueError("--list cannot be used with any other flags")
        return
    if not args.serviceName:
        raise ValueError("--serviceName is required unless --list is used")
    if not (args.osd or args.hcp):
        raise ValueError("--serviceName cannot be used without either --osd or --hcp")
    if args.osd and args.hcp:
        raise ValueError("--osd and --hcp cannot be used together")


def run_saas_promotion(args, printer=None, app_interface=None, promoter=None):
    """
    Entry point for 'promote saas'.

    Returns:
        int: Process exit code
    """
    printer = get_printer(printer)
    if not args.list and (not args.serviceName or not args.gitHash):
        _print_saas_usage(printer)

    try:
        validate_saas_options(args)
    except ValueError as e:
        printer.print_error(f"Error: {e}")
        return EXIT_FAILURE

    app_interface = app_interface or AppInterface(args.app_interface_dir, printer=printer)
    promoter = promoter or SaasPromoter(app_interface, printer=printer)

    try:
        app_interface.bootstrap()
        if args.list:
            promoter.list_service_names()
            return EXIT_SUCCESS
        return promoter.promote(args.serviceName, args.gitHash, args.osd, args.hcp)
    except (ValueError, RuntimeError, OSError) as e:
        printer.print_error(f"Error while promoting service: {e}")
        return EXIT_FAILURE


def run_package_promotion(args, printer=None, app_interface=None, promoter=None):
    """
    Entry point for 'promote package'. Packages are promoted through the service's OSD SAAS file.

    Returns:
        int: Process exit code
    """
    printer = get_printer(printer)
    if not args.service or not args.gitHash:
        printer.print_error("Error: --service and --gitHash are required to promote a package")
        return EXIT_FAILURE

    app_interface = app_interface or AppInterface(args.app_interface_dir, printer=printer)
    promoter = promoter or SaasPromoter(app_interface, printer=printer)

    try:
        app_interface.bootstrap()
        return promoter.promote(args.service, args.gitHash, osd=True, hcp=False)
    except (ValueError, RuntimeError, OSError) as e:
        printer.print_error(f"Error while promoting package: {e}")
        return EXIT_FAILURE
