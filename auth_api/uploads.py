import logging
import os
import uuid

from flask import Blueprint, request, jsonify, abort, current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

bp = Blueprint("uploads", __name__)

IMAGE_FIELD = "image"


def _temp_path(file_storage) -> str:
    """Unique path under UPLOAD_FOLDER for the uploaded file."""
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    filename = secure_filename(file_storage.filename or "") or "upload"
    path = os.path.join(folder, f"{uuid.uuid4().hex}-{filename}")
    return path


@bp.post("/upload")
def upload_image():
    """
    Upload an image to the media host
    ---
    tags:
      - Uploads
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: image
        type: file
        required: true
    responses:
      200:
        description: Uploaded; returns the hosted url
      400:
        description: No image file uploaded
      500:
        description: Upload failed
    """
    file_storage = request.files.get(IMAGE_FIELD)
    if file_storage is None or not file_storage.filename:
        abort(400, description="no image file uploaded")

    uploader = current_app.extensions["media_uploader"]
    path = _temp_path(file_storage)
    try:
        file_storage.save(path)
        url = uploader.upload(path)
    except Exception:
        logger.exception("Image upload failed")
        url = None
    finally:
        # normally already removed by the uploader
        if os.path.exists(path):
            os.remove(path)

    if not url:
        abort(500, description="error occured while uploading image")

    return jsonify({"message": "image uploaded successfully", "url": url}), 200
