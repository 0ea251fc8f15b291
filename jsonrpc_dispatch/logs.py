EMPTY_RESPONSE: str = "Request produced no response."
CALL_INTERCEPTED: str = "Received RPC: %s"
BATCH_RECEIVED: str = "Received batch of %d request(s)."
RPC_METHOD_CALL_START: str = "Calling the '%s' procedure with RPC ID #%s."
RPC_METHOD_CALL_END: str = "RPC ID #%s for procedure '%s' processed with result: %s."
RPC_METHOD_PARAMS: str = "Procedure '%s' called with params: %s"
RPC_NOTIFICATION_START: str = "Notification '%s' received."
RPC_NOTIFICATION_END: str = "Notification '%s' processed."
INVALID_JSON_RPC_VERSION: str = "Invalid JSON-RPC version! Expected '2.0', got '%s'."
PROCEDURE_NOT_FOUND: str = "Procedure '%s' is not registered."
OUTPUT_ERROR_DETECTED: str = "Procedure '%s' returned an error: %s"
APPLICATION_ERROR: str = "Procedure '%s' raised an application error: %s"
UNENCODABLE_RESPONSE: str = "Response for RPC ID #%s could not be encoded: %s"

# flakes8: noqa: E501
