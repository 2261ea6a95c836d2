"""Azure REST header names."""

# Location to poll for the status of a long-running operation
HEADER_ASYNC_OPERATION = "Azure-AsyncOperation"

# Caller-supplied correlation ID
HEADER_CLIENT_ID = "x-ms-client-request-id"

# Boolean asking the service to echo x-ms-client-request-id back
HEADER_RETURN_CLIENT_ID = "x-ms-return-client-request-id"

# Service-generated request ID
HEADER_REQUEST_ID = "x-ms-request-id"
