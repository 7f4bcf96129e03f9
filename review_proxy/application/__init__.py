# Application Layer
# =================
# Use cases wired from infrastructure components passed in by the caller:
# - review_service: aggregation + avatar decoration + stats
# - submission_service: image upload, product id resolution, forwarding
# - pin_service: pin / unpin
# - auth_service: admin login and token checks
