"""Settings API endpoints."""

from flask import Blueprint, Response, request, jsonify

from api import get_services
from api.middleware.exceptions import NotFoundError, ValidationError
from utils.logger import log_payload

settings_bp = Blueprint("settings", __name__)


def _json_object() -> dict:
    """Parse the request body as a JSON object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _flag(name: str) -> bool:
    return request.args.get(name, "false").lower() in ("true", "1", "yes")


@settings_bp.route("", methods=["GET"])
def get_all_settings():
    """Get all settings (encrypted values withheld unless requested)."""
    store = get_services().store
    return jsonify({"settings": store.get_all(include_encrypted=_flag("include_encrypted"))})


@settings_bp.route("", methods=["PUT"])
def import_settings():
    """Import several settings at once, encrypting sensitive keys."""
    data = _json_object()
    log_payload("Importing settings", data)
    imported = get_services().store.import_settings(data, encrypt_sensitive=True)
    return jsonify({"imported": imported})


@settings_bp.route("/app", methods=["GET"])
def get_app_settings():
    """Get the application settings with defaults applied."""
    return jsonify({"settings": get_services().app_settings.get_app_settings()})


@settings_bp.route("/app", methods=["PUT"])
def update_app_settings():
    """Update application settings by field name."""
    facade = get_services().app_settings
    facade.update_app_settings(_json_object())
    return jsonify({"settings": facade.get_app_settings()})


@settings_bp.route("/reset", methods=["POST"])
def reset_settings():
    """Delete every setting."""
    deleted = get_services().store.reset()
    return jsonify({"deleted": deleted})


@settings_bp.route("/backup", methods=["GET"])
def download_backup():
    """Return a backup document."""
    backup = get_services().store.create_backup()
    return Response(backup, mimetype="application/json")


@settings_bp.route("/backup", methods=["POST"])
def write_backup_file():
    """Write a backup file to the backups directory."""
    path = get_services().backups.write_backup()
    return jsonify({"file": path.name}), 201


@settings_bp.route("/restore", methods=["POST"])
def restore_backup():
    """Restore settings from a backup document sent as the request body."""
    restored = get_services().store.restore_from_backup(request.get_data(as_text=True))
    return jsonify({"restored": restored})


@settings_bp.route("/<key>", methods=["GET"])
def get_setting(key: str):
    """Get a specific setting."""
    value = get_services().store.get(key)
    if value is None:
        raise NotFoundError("Setting", key)
    return jsonify({"key": key, "value": value})


@settings_bp.route("/<key>", methods=["PUT"])
def update_setting(key: str):
    """Update a specific setting."""
    data = _json_object()
    if "value" not in data:
        raise ValidationError("Missing 'value'", details={"key": key})

    store = get_services().store
    encrypt = data.get("encrypt")
    if encrypt is None:
        encrypt = key in store.sensitive_keys
    elif not isinstance(encrypt, bool):
        raise ValidationError("'encrypt' must be a boolean", details={"key": key})

    store.set(key, data["value"], encrypt)
    return jsonify({"key": key, "encrypted": encrypt})


@settings_bp.route("/<key>", methods=["DELETE"])
def delete_setting(key: str):
    """Delete a specific setting."""
    get_services().store.delete(key)
    return "", 204
