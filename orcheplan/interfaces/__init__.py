"""Interface layer for orcheplan.

Front ends that drive the ``Workspace`` facade. The bundled one is the
typer CLI in ``orcheplan.interfaces.cli``.
"""
