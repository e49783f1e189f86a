"""Flask application factory for the simulator web UI.

The ``create_app`` function builds a simulator, creates a shell, and
returns a Flask app with three endpoints:

- ``GET /`` — render the terminal HTML page.
- ``POST /api/execute`` — execute a command and return JSON.
- ``GET /api/status`` — return the run summary and frame snapshot.
"""

from __future__ import annotations

from flask import Flask, Response, jsonify, render_template, request

from py_ossim.config import SimulatorConfig
from py_ossim.shell import Shell
from py_ossim.simulator import Simulator

_HTTP_BAD_REQUEST = 400


def create_app(config: SimulatorConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Simulator settings (defaults if None).

    Returns:
        A configured Flask application ready to serve.

    """
    simulator = Simulator(config)
    shell = Shell(simulator=simulator)

    app = Flask(__name__)

    def _stopped() -> Response:
        return jsonify({"output": "Simulation stopped.", "tick": simulator.tick, "halted": True})

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the terminal HTML page."""
        return render_template("index.html", help_text=shell.help_text)

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output``, ``tick`` and ``halted`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        if shell.halted:
            return _stopped()

        result = shell.execute(str(data["command"]))
        if result == Shell.EXIT_SENTINEL:
            return _stopped()

        return jsonify({"output": result, "tick": simulator.tick, "halted": False})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the run summary and the current frame table."""
        frames = [
            {
                "frame_id": f.frame_id,
                "pid": f.owner_pid,
                "page": f.page_number,
                "loaded_at": f.loaded_at,
                "last_accessed": f.last_accessed,
            }
            for f in simulator.memory.snapshot()
        ]
        return jsonify(
            {
                "running": not shell.halted,
                "stats": simulator.stats(),
                "frames": frames,
            }
        )

    return app


def main() -> None:
    """Run the web UI development server.

    This is the ``py-ossim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
