"""Server-wide constants."""

PROJECT_NAME = "Early Autism Detector"
API_V1_STR = "/api/v1"

CENTER_SESSION_COOKIE = "center_session_token"
CENTER_SESSION_DAYS = 7
