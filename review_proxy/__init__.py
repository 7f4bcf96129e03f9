# Review Proxy - Judge.me Review Aggregation Backend
# ==================================================
# Serves product reviews from Judge.me decorated with generated avatars,
# keeps a small set of pinned reviews and forwards new reviews (with
# uploaded images) back to Judge.me.
#
# ARCHITECTURE LAYERS:
# - Presentation:   FastAPI routes (web/)
# - Application:    Aggregation, submission, pinning and auth use cases
# - Infrastructure: External services (Judge.me, Cloudinary, genderize, Firestore)
#
# Every external service sits behind a small class so it can be swapped
# (or faked in tests) without touching the application layer.
