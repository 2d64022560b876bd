from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from .model import EntryRef


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object")
        return data

    def _ref(data: dict) -> EntryRef:
        try:
            day = parse_iso_date(str(data.get("date") or ""))
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")
        return EntryRef(
            matricule=str(data.get("matricule") or ""),
            subject_id=str(data.get("subject_id") or ""),
            date=day,
            start=str(data.get("start") or ""),
            end=str(data.get("end") or ""),
        )

    def _error(e: Exception):
        status = 404 if isinstance(e, NotFoundError) else 400
        return jsonify({"success": False, "message": str(e)}), status

    @app.route("/attendance/presence", methods=["POST"], endpoint="attendance_presence")
    def attendance_presence():
        try:
            data = _body()
            result = asyncio.run(
                container.attendance_service.record_presence(
                    str(data.get("matricule") or ""),
                    subject_id=str(data.get("subject_id") or ""),
                    subject_label=str(data.get("subject_label") or ""),
                    start=str(data.get("start") or ""),
                    end=str(data.get("end") or ""),
                    teacher=str(data.get("teacher") or ""),
                    room=str(data.get("room") or ""),
                    year=str(data.get("year") or ""),
                    semester=str(data.get("semester") or ""),
                )
            )
        except (ValidationError, NotFoundError) as e:
            return _error(e)
        return jsonify({"success": True, "counted": result.counted}), 201

    @app.route("/attendance/justifications", methods=["POST"], endpoint="attendance_justification_submit")
    def attendance_justification_submit():
        try:
            data = _body()
            documents = data.get("documents") or []
            if not isinstance(documents, list):
                raise ValidationError("documents must be a list")
            justification = asyncio.run(
                container.attendance_service.submit_justification(
                    str(data.get("session_id") or ""),
                    _ref(data),
                    content=str(data.get("content") or ""),
                    documents=[str(d) for d in documents],
                )
            )
        except (ValidationError, NotFoundError) as e:
            return _error(e)
        return jsonify({"success": True, "status": justification.status.value})

    @app.route("/attendance/justifications/review", methods=["POST"], endpoint="attendance_justification_review")
    def attendance_justification_review():
        try:
            data = _body()
            decision = str(data.get("decision") or "").lower()
            if decision not in {"approve", "reject"}:
                raise ValidationError("decision must be 'approve' or 'reject'")
            justification = asyncio.run(
                container.attendance_service.review_justification(
                    str(data.get("session_id") or ""),
                    _ref(data),
                    approve=decision == "approve",
                )
            )
        except (ValidationError, NotFoundError) as e:
            return _error(e)
        return jsonify({"success": True, "status": justification.status.value})
