#!/usr/bin/env python3
"""Utilities module for the osdctl operator tools."""

import json
import os
import subprocess
import time

from .print_manager import printer as default_printer

OCM_CLI_ENV = "OCM_CLI"


def _is_retryable_error(stderr_text):
    """Check if the error is worth retrying."""
    if not stderr_text:
        return False

    # Common API connectivity issues that warrant retry
    retryable_patterns = [
        "connection refused",
        "timeout",
        "timed out",
        "connection reset",
        "temporary failure in name resolution",
        "service unavailable",
        "internal server error",
        "bad gateway",
        "too many requests",
        "context deadline exceeded",
    ]

    stderr_lower = stderr_text.lower()
    return any(pattern in stderr_lower for pattern in retryable_patterns)


def _log_retry_attempt(printer, attempt, max_retries, exec_command):
    """Log retry attempt information."""
    if not printer:
        return
    if attempt == 0:
        printer.print_action(f"Executing command: {' '.join(exec_command)}")
    else:
        printer.print_info(f"Retry attempt {attempt}/{max_retries}: {' '.join(exec_command)}")


def _handle_command_success(result, json_output, attempt, printer):
    """Handle successful command execution."""
    if attempt > 0 and printer:
        printer.print_success(f"Command succeeded on retry attempt {attempt}")
    if json_output:
        return json.loads(result.stdout)
    return result.stdout.strip()


def _handle_command_failure(result, attempt, max_retries, retry_delay, printer):
    """Handle command failure and determine if retry should occur."""
    stderr = result.stderr
    if attempt < max_retries and _is_retryable_error(stderr):
        if printer:
            printer.print_warning(f"Command failed with retryable error, waiting {retry_delay}s before retry...")
            printer.print_info(f"Error: {stderr.strip()}")
        time.sleep(retry_delay)
        return True, stderr
    if printer:
        printer.print_action(f"Command failed: {stderr.strip() if stderr else 'no error output'}")
    return False, stderr


def execute_command(exec_command, json_output=False, cwd=None, printer=None, max_retries=3, retry_delay=2):
    """
    Execute an external command with retry logic for transient failures.

    Args:
        exec_command: Full command list, binary first
        json_output: If True, parse stdout as JSON
        cwd: Optional working directory for the command
        printer: Printer instance for output
        max_retries: Maximum number of retry attempts (default: 3)
        retry_delay: Seconds to wait between retries (default: 2)

    Returns:
        str or dict: Command output as string, or parsed JSON if json_output=True.
                    Returns None on command failure after all retries.
    """
    last_error = None

    for attempt in range(max_retries + 1):  # +1 for the initial attempt
        try:
            _log_retry_attempt(printer, attempt, max_retries, exec_command)
            result = subprocess.run(exec_command, capture_output=True, text=True, cwd=cwd)

            if result.returncode == 0:
                return _handle_command_success(result, json_output, attempt, printer)

            should_retry, last_error = _handle_command_failure(result, attempt, max_retries, retry_delay, printer)
            if not should_retry:
                return None
            retry_delay *= 1.5  # Exponential backoff with factor of 1.5

        except json.JSONDecodeError as e:
            if printer:
                printer.print_error(f"Failed to parse JSON output: {e}")
            return None
        except FileNotFoundError:
            if printer:
                printer.print_error(f"Command not found: {exec_command[0]}")
            return None

    # Should not reach here, but just in case
    if printer:
        printer.print_error(f"Command failed after {max_retries} retries. Last error: {last_error}")
    return None


def execute_ocm_command(command, json_output=True, printer=None, max_retries=3, retry_delay=2):
    """
    Execute an OCM CLI command.

    The binary defaults to 'ocm' and can be overridden with the OCM_CLI environment variable.

    Args:
        command: List of command arguments to execute (excluding 'ocm')
        json_output: If True, parse the result as JSON (default: True)
        printer: Printer instance for output
        max_retries: Maximum number of retry attempts (default: 3)
        retry_delay: Seconds to wait between retries (default: 2)

    Returns:
        dict or str: Parsed JSON (or raw output), or None on failure
    """
    ocm_binary = os.environ.get(OCM_CLI_ENV, "ocm")
    return execute_command(
        [ocm_binary] + command,
        json_output=json_output,
        printer=printer,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


def execute_git_command(command, cwd=None, printer=None):
    """
    Execute a git command in the given repository.

    Git commands touch local state only, so they are never retried.

    Args:
        command: List of command arguments to execute (excluding 'git')
        cwd: Repository directory
        printer: Printer instance for output

    Returns:
        str or None: Stripped stdout, or None if the command failed
    """
    return execute_command(["git"] + command, cwd=cwd, printer=printer, max_retries=0)


def format_runtime(start_time, end_time):
    """
    Format runtime duration in a human-readable way.

    Args:
        start_time (float): Start timestamp from time.time()
        end_time (float): End timestamp from time.time()

    Returns:
        str: Formatted runtime string (e.g., "5m 23s", "1h 15m 30s")
    """
    total_seconds = int(end_time - start_time)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    elif minutes > 0:
        return f"{minutes}m {seconds}s"
    else:
        return f"{seconds}s"


def get_printer(printer=None):
    """Return the given printer or the module-level default."""
    return printer if printer is not None else default_printer
