"""API-related constants."""

# HTTP Status Codes
# Both error translators answer with 406; clients rely on it.
HTTP_406_NOT_ACCEPTABLE = 406

# Media types
JSON_MEDIA_TYPE = "application/json"
JSON_CONTENT_TYPES = {"application/json", "text/json"}
FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}

# HTTP Headers
ACCEPT_HEADER = "accept"
AUTHORIZATION_HEADER = "authorization"

# Request handling
REQUEST_BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
PAGE_QUERY_PARAM = "page"
LIMIT_QUERY_PARAM = "limit"

# Routing
HEALTH_PATH = "/health"
SUPPORTED_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")
