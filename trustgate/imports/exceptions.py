class SchemaInvalidError(Exception):
    """Raised when an imported exam is malformed or fails schema validation."""
