"""
Test Gate

Runs the project's test command and records whether it passed. A failing
run short-circuits the analysis stage.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Union


logger = logging.getLogger(__name__)


def run_tests(command: str, cwd: Union[str, Path] = ".", timeout: Optional[int] = None) -> bool:
    """
    Run the test command.

    Args:
        command: Shell-style command line, e.g. "dotnet test --verbosity normal"
        cwd: Working directory
        timeout: Optional timeout in seconds

    Returns:
        True if the command exited with status 0
    """
    args = shlex.split(command)
    logger.info(f"Running tests: {command}")

    try:
        result = subprocess.run(args, cwd=cwd, timeout=timeout)
    except (subprocess.SubprocessError, OSError) as e:
        logger.error(f"Test command failed to run: {e}")
        return False

    passed = result.returncode == 0
    if passed:
        logger.info("Tests passed")
    else:
        logger.warning(f"Tests failed with exit code {result.returncode}")
    return passed


def write_test_results(path: Union[str, Path], passed: bool) -> Path:
    """Write the TEST_PASSED=true/false results file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"TEST_PASSED={'true' if passed else 'false'}\n", encoding="utf-8")
    return path


def read_test_results(path: Union[str, Path]) -> Optional[bool]:
    """Read the results file; None if it does not exist or has no TEST_PASSED entry."""
    path = Path(path)
    if not path.is_file():
        return None

    for line in path.read_text(encoding="utf-8").splitlines():
        key, _, value = line.partition('=')
        if key.strip() == "TEST_PASSED":
            return value.strip().lower() == "true"
    return None
