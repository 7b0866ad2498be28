from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_LOG_LIMIT
from ..core.enums import SyncDirection, SyncStatus
from ..core.exceptions import MigrationError, SyncError, SyncInProgressError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _direction(value: str) -> SyncDirection:
        try:
            return SyncDirection(value)
        except ValueError:
            raise ValidationError(f"Unknown direction: {value}")

    @app.route("/api/sync/entities", methods=["GET"], endpoint="sync_entities")
    def sync_entities():
        return jsonify({"entities": container.coordinator.entity_names})

    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    def sync_status():
        return jsonify(container.coordinator.snapshot())

    @app.route("/api/sync/all/<direction>", methods=["POST"], endpoint="sync_all")
    def sync_all(direction: str):
        try:
            d = _direction(direction)
        except ValidationError as e:
            return jsonify({"status": "error", "error": str(e)}), 400
        results = container.coordinator.run_all(d)
        failed = [name for name, st in results.items() if st.status == SyncStatus.ERROR]
        body = {
            "status": "error" if failed else "success",
            "results": {name: st.to_dict() for name, st in results.items()},
        }
        if failed:
            body["error"] = f"Failed: {', '.join(failed)}"
        return jsonify(body), (500 if failed else 200)

    @app.route("/api/sync/<entity>/<direction>", methods=["POST"], endpoint="sync_entity")
    def sync_entity(entity: str, direction: str):
        try:
            d = _direction(direction)
        except ValidationError as e:
            return jsonify({"status": "error", "error": str(e)}), 400
        if entity not in container.adapters:
            return jsonify({"status": "error", "error": f"Unknown entity: {entity}"}), 404

        progress: list[str] = []
        try:
            container.coordinator.run(entity, d, progress.append)
        except SyncInProgressError as e:
            return jsonify({"status": "error", "error": str(e)}), 409
        except SyncError as e:
            return jsonify({"status": "error", "progress": progress, "error": str(e)}), 500
        return jsonify({"status": "success", "progress": progress})

    @app.route("/api/sync/logs", methods=["GET"], endpoint="sync_logs")
    def sync_logs():
        limit = request.args.get("limit", type=int)
        if limit is None:
            limit = DEFAULT_LOG_LIMIT
        return jsonify({"logs": container.activity_log.entries(limit)})

    @app.route("/api/sync/logs", methods=["DELETE"], endpoint="clear_sync_logs")
    def clear_sync_logs():
        container.activity_log.clear()
        return jsonify({"status": "success"})

    @app.route("/api/migrations/csv-to-json", methods=["POST"], endpoint="migrate_csv_to_json")
    def migrate_csv_to_json():
        progress: list[str] = []
        try:
            results = container.migrate(progress.append)
        except MigrationError as e:
            return jsonify({"status": "error", "progress": progress, "error": str(e)}), 500
        return jsonify(
            {
                "status": "success",
                "progress": progress,
                "results": {name: summary.to_dict() for name, summary in results.items()},
            }
        )
