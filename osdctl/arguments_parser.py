#!/usr/bin/env python3
"""Arguments Parser module for the osdctl operator tools."""

import argparse

from . import print_manager


class ArgumentsParser:
    """Handles command-line argument parsing for all osdctl subcommands"""

    @staticmethod
    def _add_report_commands(subparsers):
        report = subparsers.add_parser(
            "report",
            help="Interact with SRE weekly reports",
            description="Perform operations and analyze trends within the SRE weekly report",
        )
        report_commands = report.add_subparsers(dest="report_command", metavar="<command>", required=True)

        analyze = report_commands.add_parser(
            "analyze",
            help="Analyze the SRE weekly report",
            description="Perform analysis on the SRE weekly reports",
        )
        analyze_commands = analyze.add_subparsers(dest="analyze_command", metavar="<command>", required=True)

        org = analyze_commands.add_parser(
            "org",
            aliases=["orgs", "organization", "organizations"],
            help="Analyze noise by organization",
            description=(
                "Perform analysis on SRE weekly report raw data. "
                "Report should be provided as a .csv file from the 'Incident's Details' tab"
            ),
        )
        org.add_argument("report_file", metavar="<report file path>", help="Path to the report .csv file")
        org.add_argument(
            "-o",
            "--output",
            type=str,
            default="long",
            help="Specify how the results are displayed. Options are 'short', 'yaml', 'json', 'long' (default)",
        )
        org.add_argument(
            "-n",
            "--number",
            type=int,
            default=5,
            help=(
                "Number of organizations displayed when summarizing data. Values <= 0 display all results. "
                "Only used with 'short' and 'long' output. Default is 5"
            ),
        )
        org.add_argument(
            "--search",
            type=str,
            default="",
            help=(
                "Regular expression to match against. Only organizations whose name or ID matches "
                "the pattern are included in the final results"
            ),
        )
        org.set_defaults(command_name="report-analyze-org")

    @staticmethod
    def _add_app_interface_dir(parser):
        parser.add_argument(
            "--app-interface-dir",
            dest="app_interface_dir",
            type=str,
            default=None,
            help="Path to the local app-interface checkout (default: current directory)",
        )

    @staticmethod
    def _add_promote_commands(subparsers):
        promote = subparsers.add_parser(
            "promote",
            help="Utilities to promote services/operators",
            description="Promote services/operators through app-interface",
        )
        promote_commands = promote.add_subparsers(dest="promote_command", metavar="<command>", required=True)

        saas = promote_commands.add_parser(
            "saas",
            help="Utilities to promote SaaS services/operators",
            epilog=(
                "examples:\n"
                "  osdctl promote saas --list\n"
                "  osdctl promote saas --serviceName <service-name> --gitHash <git-hash> --osd\n"
                "  osdctl promote saas --serviceName <service-name> --gitHash <git-hash> --hcp"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        saas.add_argument("-l", "--list", action="store_true", help="List all SaaS services/operators")
        saas.add_argument("--serviceName", type=str, default="", help="SaaS service/operator getting promoted")
        saas.add_argument(
            "-g",
            "--gitHash",
            type=str,
            default="",
            help="Git hash of the SaaS service/operator commit getting promoted (default: HEAD of master)",
        )
        saas.add_argument("--osd", action="store_true", help="OSD service/operator getting promoted")
        saas.add_argument("--hcp", action="store_true", help="HCP service/operator getting promoted")
        ArgumentsParser._add_app_interface_dir(saas)
        saas.set_defaults(command_name="promote-saas")

        package = promote_commands.add_parser(
            "package",
            help="Utilities to promote package-operator packages",
            epilog="examples:\n  osdctl promote package --service <service-name> --gitHash <git-hash>",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        package.add_argument("-g", "--gitHash", type=str, default="", help="Git hash of the package to promote")
        package.add_argument("-s", "--service", type=str, default="", help="Service/Operator getting promoted")
        ArgumentsParser._add_app_interface_dir(package)
        package.set_defaults(command_name="promote-package")

    @staticmethod
    def _add_cluster_commands(subparsers):
        cluster = subparsers.add_parser("cluster", help="Provides information for a specified cluster")
        cluster_commands = cluster.add_subparsers(dest="cluster_command", metavar="<command>", required=True)

        context = cluster_commands.add_parser("context", help="Shows the context of a specified cluster")
        context.add_argument("cluster_id", metavar="<cluster>", help="Cluster ID, name or external ID")
        context.add_argument("--verbose", action="store_true", help="Verbose output")
        context.add_argument(
            "-d",
            "--days",
            type=int,
            default=30,
            help="Number of days of Error service logs to display (default: 30)",
        )
        context.set_defaults(command_name="cluster-context")

    @staticmethod
    def build_parser():
        """
        Build the osdctl argument parser

        Returns:
            argparse.ArgumentParser: Parser with all subcommands registered
        """
        parser = argparse.ArgumentParser(
            prog="osdctl", description="OSD operator tools for weekly reports, promotions and cluster context"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug output (shows command execution details)",
        )

        subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)
        ArgumentsParser._add_report_commands(subparsers)
        ArgumentsParser._add_promote_commands(subparsers)
        ArgumentsParser._add_cluster_commands(subparsers)
        return parser

    @staticmethod
    def parse_arguments(argv=None):
        """
        Parse command-line arguments and return configuration

        Args:
            argv: Optional argument list (defaults to sys.argv[1:])

        Returns:
            argparse.Namespace: Parsed arguments
        """
        args = ArgumentsParser.build_parser().parse_args(argv)

        # Set global debug mode
        print_manager.DEBUG_MODE = args.debug

        return args
