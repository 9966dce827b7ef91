"""
Main entry point for the Hack completion Language Server.

This file is executed when running: python -m hackcomplete

The server communicates with editors via stdin/stdout using JSON-RPC.

Completion needs a host typechecker. Point HACKCOMPLETE_PIPELINE at a
zero-argument factory returning a TypecheckPipeline, e.g.

    HACKCOMPLETE_PIPELINE=mytools.hack:make_pipeline hackcomplete

Without it the server still starts and indexes the workspace, but returns
no completions.
"""
import importlib
import os
import sys

from hackcomplete.errors import HackCompleteError
from hackcomplete.lsp.server import create_server
from hackcomplete.pipeline.host import TypecheckPipeline

PIPELINE_ENV_VAR = "HACKCOMPLETE_PIPELINE"


def load_pipeline(factory_path: str) -> TypecheckPipeline:
    """
    Build the host pipeline from a "module:factory" import path.

    Raises:
        HackCompleteError: if the path is malformed, cannot be imported or
            the factory does not return a TypecheckPipeline
    """
    module_name, sep, attr = factory_path.partition(":")
    if not sep or not module_name or not attr:
        raise HackCompleteError(
            f"{PIPELINE_ENV_VAR} must look like 'module:factory', got {factory_path!r}"
        )

    try:
        factory = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise HackCompleteError(f"Cannot load pipeline factory {factory_path}: {e}") from e

    pipeline = factory()
    if not isinstance(pipeline, TypecheckPipeline):
        raise HackCompleteError(
            f"{factory_path} returned {type(pipeline).__name__}, not a TypecheckPipeline"
        )
    return pipeline


def main():
    """Start the language server on stdin/stdout."""

    if os.getenv("DEBUG"):
        print("hackcomplete starting in DEBUG mode", file=sys.stderr)
        print("Waiting for debugger to attach on port 5678...", file=sys.stderr)
        try:
            import debugpy  # type: ignore
            debugpy.listen(("127.0.0.1", 5678))
            debugpy.wait_for_client()
        except ImportError:
            print("debugpy not available - install with: pip install debugpy", file=sys.stderr)

    pipeline = None
    factory_path = os.getenv(PIPELINE_ENV_VAR)
    if factory_path:
        try:
            pipeline = load_pipeline(factory_path)
        except HackCompleteError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    server = create_server(pipeline)
    server.start_io()


if __name__ == "__main__":
    main()
