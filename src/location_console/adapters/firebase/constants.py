"""Constants for the Firebase Realtime Database REST API.

API Documentation: https://firebase.google.com/docs/reference/rest/database
"""

# Every REST resource is addressed by appending .json to the node path
REST_SUFFIX = ".json"

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"

# Streaming event types
EVENT_PUT = "put"
EVENT_PATCH = "patch"
EVENT_KEEP_ALIVE = "keep-alive"
EVENT_CANCEL = "cancel"
EVENT_AUTH_REVOKED = "auth_revoked"
