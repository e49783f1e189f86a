"""Browser-based web UI for the simulator.

This package provides a Flask application that exposes the simulator
shell through a web browser.  It is an **optional** extra — install with::

    pip install py-ossim[web]

The ``create_app`` factory in ``app.py`` builds a simulator, creates a
shell, and serves three endpoints:

- ``GET /`` — HTML terminal page.
- ``POST /api/execute`` — execute a shell command and return JSON.
- ``GET /api/status`` — run summary and frame table for live polling.
"""
