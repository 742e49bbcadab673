class AppStatusCode:
    """Application level status codes returned next to the HTTP status."""

    OPERATION_SUCCESSFUL = "100"
    DATA_RETRIEVED_SUCCESSFULLY = "101"
    CREATED_SUCCESSFULLY = "102"

    OPERATION_FAILED = "200"
    INVALID_INPUT = "201"
    REQUIRED_VALIDATION_ERROR = "202"
    RECORD_NOT_FOUND = "203"
    DUPLICATE_RECORD = "204"
    INSUFFICIENT_INVENTORY = "205"

    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    AUTHENTICATION_USER_INVALID = "302"
    AUTHENTICATION_USER_INACTIVE = "303"
    AUTHENTICATION_CREDENTIALS_INVALID = "304"
    PERMISSION_DENIED = "305"
    ORGANIZATION_MISMATCH = "306"
