"""
Endpoint serving uploaded server images
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from ...logging import get_logger
from ...storage.images import get_images_dir

logger = get_logger(__name__)
router = APIRouter()


@router.get("/{filename}")
async def serve_image(filename: str):
    """Serve an image written by the upload handler.

    URLs handed out for uploads are ``<app_url>/images/<uuid>_<name>``.
    """
    try:
        images_dir = get_images_dir()
        file_path = images_dir / filename

        # Security check: ensure the resolved path is within the image directory
        try:
            file_path.resolve().relative_to(images_dir.resolve())
        except ValueError as e:
            logger.warning("Path traversal attempt detected", requested_path=filename)
            raise HTTPException(status_code=403, detail="Access denied") from e

        if not file_path.is_file():
            logger.info("Image not found", filename=filename)
            raise HTTPException(status_code=404, detail="Image not found")

        return FileResponse(file_path)

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error serving image", filename=filename, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error") from e
