"""Built-in CLI sub-commands for specread.

Each module defines a Typer sub-application or standalone command function
that is registered on the root app in :mod:`specread.app`.

Sub-modules:
    paths: ``specread paths`` -- print the path names of a document.
    inspect: ``specread inspect`` -- schemas, info, and re-encoded JSON.
    config: ``specread config`` -- view and modify global settings.
"""
