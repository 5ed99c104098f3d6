#!/usr/bin/env python3
"""
osdctl - Operator tools for OpenShift Dedicated

This is the main entry point for the osdctl operator tools. It parses the
command line and hands off to the module implementing the selected subcommand:

    osdctl report analyze org <report.csv>
    osdctl promote saas | promote package
    osdctl cluster context <cluster>
"""

import sys
import time

from osdctl import (
    ArgumentsParser,
    printer,
    format_runtime,
    run_org_analysis,
    run_saas_promotion,
    run_package_promotion,
    run_cluster_context,
)

COMMANDS = {
    "report-analyze-org": run_org_analysis,
    "promote-saas": run_saas_promotion,
    "promote-package": run_package_promotion,
    "cluster-context": run_cluster_context,
}


def main(argv=None):
    """
    Main function dispatching osdctl subcommands.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:])

    Returns:
        int: Process exit code of the subcommand
    """
    args = ArgumentsParser.parse_arguments(argv)

    start_time = time.time()
    exit_code = COMMANDS[args.command_name](args, printer=printer)
    printer.print_action(f"Total runtime: {format_runtime(start_time, time.time())}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
