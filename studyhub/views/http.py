from __future__ import annotations

import logging
import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from ..helpers.ws import get_dispatcher
from ..lib.utils import now_ms

http_bp = Blueprint("http", __name__)


def _reject(message: str):
    return jsonify({"success": False, "message": message}), 400


def _file_size(file) -> int:
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    return size


@http_bp.route("/api/health")
def health():
    return jsonify({"ok": True, "rooms": len(get_dispatcher().directory)})


@http_bp.route("/upload", methods=["POST"])
def upload():
    try:
        file = request.files.get("file")
    except RequestEntityTooLarge:
        return _reject("File too large")
    if file is None or not file.filename:
        return _reject("No file uploaded")
    if file.mimetype not in current_app.config["UPLOAD_ALLOWED_MIME_TYPES"]:
        return _reject("Invalid file type")
    if _file_size(file) > current_app.config["UPLOAD_MAX_BYTES"]:
        return _reject("File too large")

    original_name = file.filename
    filename = f"{now_ms()}-{secure_filename(original_name) or 'upload'}"
    upload_dir = current_app.config["UPLOAD_DIR"]
    os.makedirs(upload_dir, exist_ok=True)
    file.save(os.path.join(upload_dir, filename))
    logging.info("upload stored name=%s as=%s", original_name, filename)
    return jsonify(
        {
            "success": True,
            "filename": filename,
            "originalName": original_name,
            "url": f"/uploads/{filename}",
        }
    )


@http_bp.route("/uploads/<path:filename>")
def uploaded_file(filename: str):
    return send_from_directory(current_app.config["UPLOAD_DIR"], filename)
