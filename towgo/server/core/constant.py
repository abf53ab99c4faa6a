"""Application-wide constants shared by the server modules."""

PROJECT_NAME = "TowGo API"
API_V1_STR = "/api"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
