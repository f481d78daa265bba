"""
Cloudinary Service
Handles employee document uploads to Cloudinary cloud storage
"""
import os
import cloudinary
import cloudinary.uploader
from flask import current_app
from typing import Dict, Optional


def init_cloudinary():
    """Initialize Cloudinary with config from Flask app"""
    cloudinary.config(
        cloud_name=current_app.config.get('CLOUDINARY_CLOUD_NAME'),
        api_key=current_app.config.get('CLOUDINARY_API_KEY'),
        api_secret=current_app.config.get('CLOUDINARY_API_SECRET'),
        secure=True
    )


def is_allowed_document(filename: str) -> bool:
    """Check the extension against ALLOWED_DOCUMENT_EXTENSIONS"""
    if not filename or '.' not in filename:
        return False
    extension = os.path.splitext(filename)[1].lstrip('.').lower()
    return extension in current_app.config.get('ALLOWED_DOCUMENT_EXTENSIONS', set())


def upload_file(file_content, folder: Optional[str] = None) -> Dict[str, str]:
    """
    Upload a document (image, PDF, Word file) to Cloudinary

    Args:
        file_content: File object or file path to upload
        folder: Cloudinary folder (default: CLOUDINARY_DOCUMENTS_FOLDER)

    Returns:
        Dictionary with 'url', 'secure_url', 'public_id', 'format' and 'bytes'

    Raises:
        Exception: If upload fails
    """
    folder = folder or current_app.config.get('CLOUDINARY_DOCUMENTS_FOLDER', 'employee-documents')

    try:
        init_cloudinary()

        # "auto" keeps images viewable and stores PDFs/Word files as raw
        result = cloudinary.uploader.upload(
            file_content,
            folder=folder,
            resource_type="auto",
            allowed_formats=sorted(current_app.config.get('ALLOWED_DOCUMENT_EXTENSIONS', []))
        )

        return {
            'url': result.get('url'),
            'secure_url': result.get('secure_url'),
            'public_id': result.get('public_id'),
            'format': result.get('format'),
            'bytes': result.get('bytes'),
            'resource_type': result.get('resource_type')
        }

    except Exception as e:
        current_app.logger.error(f"Failed to upload document to Cloudinary: {str(e)}")
        raise

