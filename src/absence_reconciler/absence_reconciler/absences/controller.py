from __future__ import annotations

import asyncio

from flask import Flask, jsonify

from ..container import Container
from ..core.exceptions import StoreError


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({
            "status": "ok",
            "runner": "running" if container.scheduler.running else "stopped",
        })

    @app.route("/absences/run", methods=["POST"], endpoint="absences_run")
    def absences_run():
        """Run one reconciliation pass now and return its summary."""
        try:
            report = asyncio.run(container.scheduler.run_once())
        except StoreError as e:
            app.logger.exception("absence pass failed")
            return jsonify({"success": False, "message": str(e)}), 503
        return jsonify({"success": True, "report": report.to_dict()})

    @app.route("/absences/sessions/<path:session_id>", methods=["GET"], endpoint="absences_session")
    def absences_session(session_id: str):
        session = asyncio.run(container.sessions_repo.get(session_id))
        if session is None:
            return jsonify({"success": False, "message": "Session not found"}), 404
        return jsonify({"success": True, "id": session_id, "session": session})
