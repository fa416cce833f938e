from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from salesboard import SalesTracker
from salesboard.errors import NotFoundError, PersistenceError, ValidationError
from salesboard.models import CommissionTier, SaleEntry, to_optional_int
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")


def parse_month(value):
    """Parse a "YYYY-MM" query value into (year, month)."""
    try:
        year, month = (int(part) for part in value.split("-"))
    except (AttributeError, ValueError):
        raise ValidationError(f"month must be formatted YYYY-MM, got: {value!r}")
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 01 and 12, got: {value!r}")
    return year, month


def create_app(tracker=None):
    app = Flask(__name__)

    # Enable CORS for all routes (the dashboard front end runs on another origin)
    CORS(app)

    # One tracker per process: single user, single active project
    tracker = tracker or SalesTracker()
    output = tracker.output_builder
    app.config["TRACKER"] = tracker

    @app.route("/api", methods=["GET"])
    def api_info():
        """API information endpoint"""
        return jsonify({
            "status": "ok",
            "message": "Salesboard Commission API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "endpoints": {
                "quote": "/quote [POST]",
                "sales": "/sales [GET, POST]",
                "update_sale": "/sales/<id> [PUT]",
                "cancel_sale": "/sales/<id>/cancel [POST]",
                "tiers": "/tiers [GET]",
                "update_tier": "/tiers/<level> [PUT]",
                "daily_report": "/reports/daily [GET]",
                "monthly_report": "/reports/monthly?month=YYYY-MM [GET]",
                "saved_reports": "/reports/saved [GET, POST]",
                "health": "/health [GET]"
            }
        }), 200

    @app.route("/health", methods=["GET"])
    def health():
        """Health check for monitoring"""
        return jsonify({"status": "healthy"}), 200

    @app.route("/project", methods=["GET"])
    def current_project():
        return jsonify(output.project(tracker.current_project())), 200

    @app.route("/projects", methods=["POST"])
    def create_project():
        input_data = request.get_json(force=True) or {}
        name = (input_data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required")
        return jsonify(output.project(tracker.create_project(name))), 201

    @app.route("/reset", methods=["POST"])
    def reset():
        logger.info("Clearing all data")
        return jsonify(output.project(tracker.clear_all_data())), 200

    @app.route("/tiers", methods=["GET"])
    def get_tiers():
        project_id = request.args.get("project_id", type=int)
        current = tracker.current_tier(project_id)
        return jsonify({
            "tiers": [output.tier(t) for t in tracker.get_tiers(project_id)],
            "current_tier": output.tier(current)
        }), 200

    @app.route("/tiers/<int:level>", methods=["PUT"])
    def update_tier(level):
        input_data = request.get_json(force=True) or {}
        tier = CommissionTier.from_dict({**input_data, "level": level})
        logger.info(f"Updating commission tier {level}")
        tiers = tracker.update_tier(tier, to_optional_int(input_data.get("project_id"), "project_id"))
        return jsonify({"tiers": [output.tier(t) for t in tiers]}), 200

    @app.route("/quote", methods=["POST"])
    def quote():
        """Preview the commission for a sale without saving it"""
        input_data = request.get_json(force=True)
        if not input_data:
            raise ValidationError("No input data provided")

        entry = SaleEntry.from_dict(input_data)
        project_id = to_optional_int(input_data.get("project_id"), "project_id")
        result = output.quote(tracker.quote(entry, project_id))
        fdi_points, fdi_cost = tracker.fdi_for(entry)
        result["fdi_points"] = float(fdi_points)
        result["fdi_cost"] = output.to_money(fdi_cost)
        return jsonify(result), 200

    @app.route("/sales", methods=["GET"])
    def list_sales():
        project_id = request.args.get("project_id", type=int)
        return jsonify({"sales": [output.sale_record(s) for s in tracker.list_sales(project_id)]}), 200

    @app.route("/sales", methods=["POST"])
    def record_sale():
        """Record a sale or no-sale entry"""
        input_data = request.get_json(force=True)
        if not input_data:
            raise ValidationError("No input data provided")

        logger.info(f"Recording entry: {input_data.get('client_last_name', 'Unknown')}")
        return jsonify(tracker.record_sale_from_dict(input_data)), 201

    @app.route("/sales/<int:sale_id>", methods=["PUT"])
    def update_sale(sale_id):
        """Edit a recorded sale; it is re-priced and keeps its id"""
        input_data = request.get_json(force=True)
        if not input_data:
            raise ValidationError("No input data provided")

        logger.info(f"Updating sale {sale_id}")
        return jsonify(tracker.update_sale_from_dict(sale_id, input_data)), 200

    @app.route("/sales/<int:sale_id>/cancel", methods=["POST"])
    def cancel_sale(sale_id):
        return jsonify(output.sale_record(tracker.cancel_sale(sale_id))), 200

    @app.route("/reports/daily", methods=["GET"])
    def daily_report():
        project_id = request.args.get("project_id", type=int)
        metrics = tracker.daily_report(project_id)
        totals = tracker.monthly_aggregator.aggregate(metrics)
        return jsonify({
            "days": [output.daily_metric(m) for m in metrics],
            "monthly_totals": output.monthly_totals_map(totals)
        }), 200

    @app.route("/reports/monthly", methods=["GET"])
    def monthly_report():
        year, month = parse_month(request.args.get("month"))
        project_id = request.args.get("project_id", type=int)
        return jsonify(output.monthly_report(tracker.monthly_report(year, month, project_id))), 200

    @app.route("/reports/saved", methods=["GET"])
    def recent_reports():
        limit = request.args.get("limit", default=4, type=int)
        return jsonify({"reports": tracker.recent_reports(limit)}), 200

    @app.route("/reports/saved", methods=["POST"])
    def save_report():
        input_data = request.get_json(force=True) or {}
        name = (input_data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required")

        year, month = parse_month(input_data.get("month"))
        report = tracker.monthly_report(
            year, month, to_optional_int(input_data.get("project_id"), "project_id")
        )
        stored = tracker.save_report(name, report)
        return jsonify({"path": stored["path"], "created_at": stored["created_at"]}), 201

    @app.route("/reports/saved/<path:name>", methods=["GET"])
    def get_saved_report(name):
        return jsonify(tracker.get_report(f"/reports/saved/{name}")), 200

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description, "status": "failed"}), e.code

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        logger.error(f"Not found: {str(e)}")
        return jsonify({"error": str(e), "status": "not_found"}), 404

    @app.errorhandler(ValueError)
    @app.errorhandler(KeyError)
    @app.errorhandler(TypeError)
    def handle_validation_error(e):
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": str(e), "status": "validation_failed"}), 400

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(e):
        logger.error(f"Storage error: {str(e)}")
        return jsonify({"error": str(e), "status": "failed"}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({"error": str(e), "status": "failed"}), 500

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
