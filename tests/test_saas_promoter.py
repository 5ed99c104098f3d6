#!/usr/bin/env python3
"""
Pytest tests for the saas_promoter module.
Builds a temporary app-interface tree and mocks every git invocation.
"""

import os
import sys
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

# Add parent directory to path for module imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from osdctl.saas_promoter import (  # noqa: E402
    BP_SAAS_DIR,
    CAD_SAAS_DIR,
    EXIT_FAILURE,
    EXIT_NOTHING_TO_PROMOTE,
    EXIT_SUCCESS,
    OSD_SAAS_DIR,
    SaasPromoter,
    run_package_promotion,
    run_saas_promotion,
    validate_saas_options,
)

CURRENT_HASH = "1f2e3d4c5b6a79881f2e3d4c5b6a79881f2e3d4c"
NEW_HASH = "9f8e7d6c5b4a39281f2e3d4c5b6a79881f2e3d4c"

SAAS_TEMPLATE = """\
name: {name}
resourceTemplates:
- url: https://github.com/openshift/{name}
  targets:
  - namespace:
      $ref: /services/osd-operators/namespaces/hivep01ue1/cluster-scope.yml
    ref: {ref}
"""


@pytest.fixture
def app_interface_tree(saas_file_factory, tmp_path) -> str:
    """app-interface checkout holding single-file and progressive delivery services"""
    saas_file_factory(
        f"{OSD_SAAS_DIR}/saas-managed-cluster-config.yaml",
        SAAS_TEMPLATE.format(name="saas-managed-cluster-config", ref=CURRENT_HASH),
    )
    saas_file_factory(
        f"{OSD_SAAS_DIR}/saas-route-monitor-operator/deploy.yaml",
        SAAS_TEMPLATE.format(name="saas-route-monitor-operator", ref=CURRENT_HASH),
    )
    saas_file_factory(
        f"{OSD_SAAS_DIR}/saas-route-monitor-operator/hypershift-deploy.yaml",
        SAAS_TEMPLATE.format(name="saas-route-monitor-operator", ref=CURRENT_HASH),
    )
    saas_file_factory(f"{BP_SAAS_DIR}/saas-backplane-api.yaml", SAAS_TEMPLATE.format(name="bp", ref=CURRENT_HASH))
    saas_file_factory(f"{CAD_SAAS_DIR}/saas-configuration-anomaly-detection-db.yaml", "name: cad\n")
    saas_file_factory(f"{OSD_SAAS_DIR}/README.md", "not a service")
    return str(tmp_path / "app-interface")


@pytest.fixture
def mock_git():
    """Mock git runner for service repositories: 'master' resolves to NEW_HASH."""

    def _git(command, cwd=None, printer=None):
        if command[0] == "rev-parse":
            ref = command[2].replace("^{commit}", "")
            return {"master": NEW_HASH, NEW_HASH: NEW_HASH, CURRENT_HASH: CURRENT_HASH}.get(ref)
        if command[0] == "log":
            return "9f8e7d6 Fix reconcile loop"
        return ""

    return Mock(side_effect=_git)


@pytest.fixture
def mock_app_interface(app_interface_tree) -> Mock:
    app_interface = Mock()
    app_interface.base_dir = app_interface_tree
    return app_interface


@pytest.fixture
def promoter(mock_app_interface, mock_git, mock_printer) -> SaasPromoter:
    return SaasPromoter(mock_app_interface, execute_git_command=mock_git, printer=mock_printer)


def _saas_args(**overrides):
    args = {
        "list": False,
        "serviceName": "",
        "gitHash": "",
        "osd": False,
        "hcp": False,
        "app_interface_dir": None,
    }
    args.update(overrides)
    return SimpleNamespace(**args)


class TestServiceDiscovery:
    """Test cases for finding services in app-interface."""

    def test_get_service_names(self, promoter: SaasPromoter) -> None:
        assert promoter.get_service_names() == [
            "saas-backplane-api",
            "saas-configuration-anomaly-detection-db",
            "saas-managed-cluster-config",
            "saas-route-monitor-operator",
        ]

    def test_get_service_names_for_one_dir(self, promoter: SaasPromoter) -> None:
        assert promoter.get_service_names(BP_SAAS_DIR) == ["saas-backplane-api"]

    def test_get_service_files(self, promoter: SaasPromoter, app_interface_tree: str) -> None:
        files = promoter.get_service_files()
        assert files["saas-route-monitor-operator"] == os.path.join(
            app_interface_tree, OSD_SAAS_DIR, "saas-route-monitor-operator"
        )

    def test_list_service_names(self, promoter: SaasPromoter, mock_printer: Mock) -> None:
        promoter.list_service_names()
        printed = [c.args[0] for c in mock_printer.print_line.call_args_list]
        assert printed == sorted(printed)
        assert len(printed) == 4

    def test_validate_service_name(self, promoter: SaasPromoter) -> None:
        promoter.validate_service_name(["saas-a", "saas-b"], "saas-b")
        with pytest.raises(ValueError, match="service saas-c not found"):
            promoter.validate_service_name(["saas-a", "saas-b"], "saas-c")


class TestGetSaasFile:
    """Test cases for SAAS file resolution."""

    def test_single_file_for_osd(self, promoter: SaasPromoter) -> None:
        assert promoter.get_saas_file("saas-managed-cluster-config", osd=True, hcp=False).endswith(
            "saas-managed-cluster-config.yaml"
        )

    def test_single_file_not_available_for_hcp(self, promoter: SaasPromoter) -> None:
        with pytest.raises(ValueError, match="saas directory for service"):
            promoter.get_saas_file("saas-managed-cluster-config", osd=False, hcp=True)

    def test_directory_for_osd_and_hcp(self, promoter: SaasPromoter) -> None:
        assert promoter.get_saas_file("saas-route-monitor-operator", osd=True, hcp=False).endswith(
            os.path.join("saas-route-monitor-operator", "deploy.yaml")
        )
        assert promoter.get_saas_file("saas-route-monitor-operator", osd=False, hcp=True).endswith(
            os.path.join("saas-route-monitor-operator", "hypershift-deploy.yaml")
        )

    def test_unknown_service(self, promoter: SaasPromoter) -> None:
        with pytest.raises(ValueError):
            promoter.get_saas_file("saas-unknown", osd=True, hcp=False)


class TestCheckoutAndCompare:
    """Test cases for resolving the hash to promote."""

    def test_defaults_to_master(self, promoter: SaasPromoter, mock_git: Mock) -> None:
        result = promoter.checkout_and_compare_git_hash("https://github.com/openshift/x", "", CURRENT_HASH)

        assert result == NEW_HASH
        commands = [c.args[0] for c in mock_git.call_args_list]
        assert commands[0][:3] == ["clone", "--quiet", "https://github.com/openshift/x"]
        assert ["rev-parse", "--verify", "master^{commit}"] in commands
        assert ["log", "--oneline", f"{CURRENT_HASH}..{NEW_HASH}"] in commands

    def test_already_deployed(self, promoter: SaasPromoter) -> None:
        result = promoter.checkout_and_compare_git_hash("https://github.com/openshift/x", CURRENT_HASH, CURRENT_HASH)
        assert result == ""

    def test_clone_failure(self, promoter: SaasPromoter, mock_git: Mock) -> None:
        mock_git.side_effect = lambda command, **kwargs: None
        with pytest.raises(RuntimeError, match="failed to clone"):
            promoter.checkout_and_compare_git_hash("https://github.com/openshift/x", "", CURRENT_HASH)

    def test_unknown_hash(self, promoter: SaasPromoter) -> None:
        with pytest.raises(RuntimeError, match="failed to resolve 'deadbeef'"):
            promoter.checkout_and_compare_git_hash("https://github.com/openshift/x", "deadbeef", CURRENT_HASH)


class TestPromote:
    """Test cases for the full promotion flow."""

    def test_promote_commits_new_hash(self, promoter: SaasPromoter, mock_app_interface: Mock) -> None:
        exit_code = promoter.promote("saas-managed-cluster-config", "", osd=True, hcp=False)

        assert exit_code == EXIT_SUCCESS
        service, saas_file, current, promotion = mock_app_interface.update_and_commit.call_args[0]
        assert service == "saas-managed-cluster-config"
        assert saas_file.endswith("saas-managed-cluster-config.yaml")
        assert (current, promotion) == (CURRENT_HASH, NEW_HASH)

    def test_nothing_to_promote(self, promoter: SaasPromoter, mock_app_interface: Mock) -> None:
        exit_code = promoter.promote("saas-managed-cluster-config", CURRENT_HASH, osd=True, hcp=False)

        assert exit_code == EXIT_NOTHING_TO_PROMOTE
        mock_app_interface.update_and_commit.assert_not_called()

    def test_unknown_service(self, promoter: SaasPromoter) -> None:
        with pytest.raises(ValueError, match="not found"):
            promoter.promote("saas-unknown", "", osd=True, hcp=False)


class TestSaasOptions:
    """Test cases for 'promote saas' flag validation."""

    def test_list_alone_is_valid(self) -> None:
        validate_saas_options(_saas_args(list=True))

    def test_list_with_other_flags(self) -> None:
        with pytest.raises(ValueError, match="--list cannot be used with any other flags"):
            validate_saas_options(_saas_args(list=True, osd=True))

    def test_service_requires_target(self) -> None:
        with pytest.raises(ValueError, match="without either --osd or --hcp"):
            validate_saas_options(_saas_args(serviceName="saas-x"))

    def test_service_required(self) -> None:
        with pytest.raises(ValueError, match="--serviceName is required"):
            validate_saas_options(_saas_args(osd=True))

    def test_osd_and_hcp_are_exclusive(self) -> None:
        with pytest.raises(ValueError, match="cannot be used together"):
            validate_saas_options(_saas_args(serviceName="saas-x", osd=True, hcp=True))


class TestEntryPoints:
    """Test cases for the 'promote saas' and 'promote package' entry points."""

    def test_saas_list(self, mock_app_interface, mock_printer) -> None:
        promoter = Mock()
        exit_code = run_saas_promotion(
            _saas_args(list=True), printer=mock_printer, app_interface=mock_app_interface, promoter=promoter
        )

        assert exit_code == EXIT_SUCCESS
        mock_app_interface.bootstrap.assert_called_once()
        promoter.list_service_names.assert_called_once()
        promoter.promote.assert_not_called()

    def test_saas_invalid_flags_skip_bootstrap(self, mock_app_interface, mock_printer) -> None:
        exit_code = run_saas_promotion(
            _saas_args(list=True, gitHash="abc"), printer=mock_printer, app_interface=mock_app_interface
        )

        assert exit_code == EXIT_FAILURE
        mock_app_interface.bootstrap.assert_not_called()

    def test_saas_bootstrap_failure(self, mock_app_interface, mock_printer) -> None:
        mock_app_interface.bootstrap.side_effect = RuntimeError("you are not on the 'master' branch")

        exit_code = run_saas_promotion(
            _saas_args(serviceName="saas-x", gitHash="abc", osd=True),
            printer=mock_printer,
            app_interface=mock_app_interface,
            promoter=Mock(),
        )

        assert exit_code == EXIT_FAILURE
        assert "not on the 'master' branch" in mock_printer.print_error.call_args[0][0]

    def test_saas_promote(self, mock_app_interface, mock_printer) -> None:
        promoter = Mock()
        promoter.promote.return_value = EXIT_NOTHING_TO_PROMOTE

        exit_code = run_saas_promotion(
            _saas_args(serviceName="saas-x", hcp=True),
            printer=mock_printer,
            app_interface=mock_app_interface,
            promoter=promoter,
        )

        assert exit_code == EXIT_NOTHING_TO_PROMOTE
        promoter.promote.assert_called_once_with("saas-x", "", False, True)

    def test_saas_file_that_is_not_a_mapping_fails(
        self, saas_file_factory, mock_app_interface, mock_git, mock_printer
    ) -> None:
        saas_file_factory(f"{OSD_SAAS_DIR}/saas-broken.yaml", "just a string\n")
        promoter = SaasPromoter(mock_app_interface, execute_git_command=mock_git, printer=mock_printer)

        exit_code = run_saas_promotion(
            _saas_args(serviceName="saas-broken", gitHash=NEW_HASH, osd=True),
            printer=mock_printer,
            app_interface=mock_app_interface,
            promoter=promoter,
        )

        assert exit_code == EXIT_FAILURE
        assert "failed to parse SAAS file" in mock_printer.print_error.call_args[0][0]
        mock_app_interface.update_and_commit.assert_not_called()

    def test_package_requires_service_and_hash(self, mock_app_interface, mock_printer) -> None:
        args = SimpleNamespace(service="saas-x", gitHash="", app_interface_dir=None)
        assert run_package_promotion(args, printer=mock_printer, app_interface=mock_app_interface) == EXIT_FAILURE
        mock_app_interface.bootstrap.assert_not_called()

    def test_package_promotes_osd_saas_file(self, mock_app_interface, mock_printer) -> None:
        promoter = Mock()
        promoter.promote.return_value = EXIT_SUCCESS
        args = SimpleNamespace(service="saas-x", gitHash=NEW_HASH, app_interface_dir=None)

        exit_code = run_package_promotion(
            args, printer=mock_printer, app_interface=mock_app_interface, promoter=promoter
        )

        assert exit_code == EXIT_SUCCESS
        promoter.promote.assert_called_once_with("saas-x", NEW_HASH, osd=True, hcp=False)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short", "--cov=osdctl.saas_promoter", "--cov-report=term-missing"])
