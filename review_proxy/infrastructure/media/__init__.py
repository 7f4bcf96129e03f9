from .cloudinary_uploader import CloudinaryUploader, picture_source

__all__ = ["CloudinaryUploader", "picture_source"]
