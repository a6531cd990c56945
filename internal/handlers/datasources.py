"""HTTP handlers for the ncloud data sources.

Endpoints:
  GET  /health                                   — Health check
  GET  /api/datasources                          — List data sources and their schemas
  GET  /api/datasources/<type_name>/schema       — Schema of one data source
  POST /api/datasources/<type_name>/read         — Read a data source (body = its config)

The provider instance is taken from app.config["NCLOUD_PROVIDER"].
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from internal.provider.provider import NcloudProvider, UnknownDataSourceError

logger = logging.getLogger(__name__)

datasources_bp = Blueprint("datasources", __name__)

# Read failures by lifecycle stage
_STAGE_STATUS = {
    "validate": 400,
    "configure": 503,
    "read": 502,
    "output": 500,
}


def _provider() -> NcloudProvider:
    return current_app.config["NCLOUD_PROVIDER"]


def _unknown(type_name: str):
    return jsonify({
        "error": f"Unknown data source: '{type_name}'",
        "available": _provider().data_sources(),
    }), 404


@datasources_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"}), 200


@datasources_bp.route("/api/datasources", methods=["GET"])
def list_datasources():
    """List every data source with its schema."""
    provider = _provider()
    return jsonify({"provider": provider.type_name, "datasources": provider.schemas()}), 200


@datasources_bp.route("/api/datasources/<type_name>/schema", methods=["GET"])
def get_schema(type_name: str):
    try:
        ds = _provider().new_data_source(type_name)
    except UnknownDataSourceError:
        return _unknown(type_name)
    return jsonify({"type_name": type_name, "schema": ds.schema().to_dict()}), 200


@datasources_bp.route("/api/datasources/<type_name>/read", methods=["POST"])
def read_datasource(type_name: str):
    """Read a data source and return its new state.

    Errors come back as diagnostics; the status code tells which stage
    failed (400 config, 503 provider setup, 502 NCloud API,
    500 output file).
    """
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"error": "Request body must be valid JSON"}), 400

    try:
        resp = _provider().read_data_source(type_name, body)
    except UnknownDataSourceError:
        return _unknown(type_name)

    diagnostics = resp.diagnostics.to_list()
    if resp.failed_stage:
        logger.warning("Read of %s failed at %s: %s", type_name, resp.failed_stage, diagnostics)
        return jsonify({"state": None, "diagnostics": diagnostics}), _STAGE_STATUS[resp.failed_stage]

    return jsonify({"state": resp.state, "diagnostics": diagnostics}), 200
