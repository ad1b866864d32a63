from flask import Blueprint, current_app, request, send_from_directory
from flasgger import swag_from

from ...services.uploads import UploadStore

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.post("/upload")
@swag_from({
    "tags": ["Uploads"],
    "summary": "Upload a submission file",
    "description": "PDF, Word, PowerPoint or video files up to 100MB.",
    "consumes": ["multipart/form-data"],
    "parameters": [{"in": "formData", "name": "file", "type": "file", "required": True}],
    "responses": {200: {"description": "Stored"}, 400: {"description": "Missing file, invalid type or too large"}},
})
def upload_file():
    stored = UploadStore.from_config(current_app.config).save(request.files.get("file"))
    return {
        "message": "File uploaded successfully",
        "fileUrl": stored.url,
        "fileName": stored.name,
        "fileSize": stored.size,
    }, 200


@uploads_bp.get("/uploads/<path:filename>")
@swag_from({
    "tags": ["Uploads"],
    "summary": "Download a stored upload",
    "parameters": [{"in": "path", "name": "filename", "type": "string", "required": True}],
    "responses": {200: {"description": "File"}, 404: {"description": "Not found"}},
})
def download_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
