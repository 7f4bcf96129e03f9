# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - judgeme/: Judge.me review fetch, product lookup and submission
# - media/: Cloudinary image uploads
# - gender/: genderize.io lookup with an in-process cache
# - persistence/: pinned ids and admin credentials (Firestore or local JSON)
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting the application layer.
