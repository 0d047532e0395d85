"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import logging
import typer
from typing import Callable, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)

EXIT_CODES = {
    "ManifestNotFound": 1,
    "UnknownEcosystem": 2,
    "ValueError": 2,
    "TOMLDecodeError": 2,
    "JSONDecodeError": 2,
    "NoParserAvailable": 4,
    "MissingRequiredField": 5,
    "ImageNotFound": 6,
}

def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns exit codes:
    - 0: Success
    - 1: No manifest found (ManifestNotFound)
    - 2: Invalid input or configuration (UnknownEcosystem, ValueError, unparsable manifest)
    - 3: Container tool failure or unknown error
    - 4: No parser backend available (NoParserAvailable)
    - 5: Required field empty (MissingRequiredField)
    - 6: Image not found (ImageNotFound)

    Args:
        exc: Exception to map

    Returns:
        Exit code (1-6, with 3 as fallback for unknown exceptions)
    """
    return EXIT_CODES.get(type(exc).__name__, 3)

def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit, printing the error message to stderr.
    CLI commands don't need individual try/except blocks.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except (typer.Exit, typer.Abort):
        raise
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
