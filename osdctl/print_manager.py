#!/usr/bin/env python3
"""Print Manager module for the osdctl operator tools."""

import sys

# Global debug flag
DEBUG_MODE = False


class PrintManager:
    """Manages all output formatting and printing for the application"""

    @staticmethod
    def print_header(message):
        """Print a section header with visual separation"""
        print(f"\n{'=' * 60}")
        print(f" {message.upper()}")
        print(f"{'=' * 60}")

    @staticmethod
    def print_info(message):
        """Print informational message"""
        print(f"    [INFO]  {message}")

    @staticmethod
    def print_success(message):
        """Print success message"""
        print(f"    [✓]     {message}")

    @staticmethod
    def print_warning(message):
        """Print warning message"""
        print(f"    [⚠️]     {message}", file=sys.stderr)

    @staticmethod
    def print_error(message):
        """Print error message"""
        print(f"    [✗]     {message}", file=sys.stderr)

    @staticmethod
    def print_action(message):
        """Print action being performed (only in debug mode)"""
        if DEBUG_MODE:
            print(f"    [ACTION] {message}")

    @staticmethod
    def print_line(message=""):
        """Print a message as-is"""
        print(message)

    @staticmethod
    def print_table(rows, min_width=20, padding=3):
        """
        Print rows as left-aligned columns.

        Args:
            rows: List of rows, each a list of cell strings. The first row is treated like any other.
            min_width: Minimum width of every column
            padding: Spaces added after the widest cell of a column
        """
        if not rows:
            return
        columns = max(len(row) for row in rows)
        widths = [min_width] * columns
        for row in rows:
            for index, cell in enumerate(row):
                widths[index] = max(widths[index], len(str(cell)) + padding)
        for row in rows:
            line = "".join(str(cell).ljust(widths[index]) for index, cell in enumerate(row))
            print(line.rstrip())


# Create a global print manager instance for convenience
printer = PrintManager()
