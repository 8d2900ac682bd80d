"""Lambda direct invocation transport.

This module implements direct Lambda invocation, bypassing API Gateway
for lower latency and simpler authentication (uses AWS credentials
instead of OAuth). The function receives an API Gateway proxy event and
its proxy result is normalized into a Response.
"""

import asyncio
import base64
import json
import logging
import time
from typing import Any, Mapping

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from .config import CallwireConfig
from .exceptions import LambdaInvocationError, TransportError
from .response import HTTPMethod, Response

logger = logging.getLogger("callwire")

# Service-side faults reported as a retryable 503 response
THROTTLING_ERROR_CODES = (
    "TooManyRequestsException",
    "ServiceException",
    "ServiceUnavailableException",
)


class LambdaTransport:
    """Direct Lambda invocation transport.

    Implements the RequestTransport protocol for functions that speak the
    API Gateway proxy format.

    Usage:
        transport = LambdaTransport(config)
        response = await transport.request("/users/42", HTTPMethod.GET)
    """

    # Cold start threshold for logging (seconds)
    COLD_START_THRESHOLD_SECONDS = 5.0

    def __init__(
        self,
        config: CallwireConfig | None = None,
        session: "boto3.Session | None" = None,
    ):
        """Initialize Lambda transport.

        Args:
            config: Callwire configuration. If None, loads from environment.
            session: Optional existing boto3 session (for testing or advanced use).
        """
        self.config = config or CallwireConfig()

        # Create or use provided session
        self._session = session or boto3.Session(
            profile_name=self.config.aws_profile,
            region_name=self.config.aws_region,
        )

        # Retries belong to the execution engine, not to botocore
        boto_config = BotoConfig(
            read_timeout=self.config.lambda_timeout,
            connect_timeout=10,
            retries={"max_attempts": 0},
        )

        self._lambda = self._session.client("lambda", config=boto_config)
        self._function_name = self.config.lambda_function_name

    async def close(self) -> None:
        """boto3 clients don't require explicit closing."""
        pass

    async def __aenter__(self) -> "LambdaTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _build_event(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict:
        """Build API Gateway REST API format event.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path (e.g., "/users/42")
            body: Optional encoded JSON body
            headers: Optional request headers

        Returns:
            Event dictionary in API Gateway v1 format
        """
        event_headers = {"Content-Type": "application/json"}
        if headers:
            event_headers.update(headers)
        return {
            "httpMethod": method,
            "path": path,
            "body": body.decode("utf-8") if body else None,
            "isBase64Encoded": False,
            "headers": event_headers,
            "queryStringParameters": None,
            "pathParameters": None,
            "requestContext": {
                "identity": {},
                "requestId": None,  # Lambda will generate if needed
            },
        }

    def _to_response(self, payload: Any) -> Response:
        """Normalize an API Gateway proxy result.

        Expects {statusCode, body, headers, isBase64Encoded}; a missing
        status code means 200.

        Raises:
            TransportError: If the payload is not a proxy result
        """
        if not isinstance(payload, dict):
            raise TransportError(
                f"Malformed Lambda response from {self._function_name}: "
                f"expected an object, got {type(payload).__name__}"
            )

        body = payload.get("body")
        if body is None:
            data = b""
        elif payload.get("isBase64Encoded"):
            data = base64.b64decode(body)
        elif isinstance(body, str):
            data = body.encode("utf-8")
        else:
            # Some handlers return the body as a JSON value
            data = json.dumps(body).encode("utf-8")

        headers = {
            str(key): str(value)
            for key, value in (payload.get("headers") or {}).items()
        }

        try:
            status_code = int(payload.get("statusCode", 200))
        except (TypeError, ValueError) as e:
            raise TransportError(f"Malformed Lambda status code: {payload.get('statusCode')!r}") from e

        return Response(payload=data, status_code=status_code, headers=headers)

    async def request(
        self,
        path: str,
        method: HTTPMethod,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Invoke the Lambda function.

        Args:
            path: API path
            method: HTTP method
            body: Encoded JSON body
            headers: Request headers

        Returns:
            Response normalized from the proxy result. Function errors come
            back as 500 and throttling as 503.

        Raises:
            LambdaInvocationError: If the function is missing or access is denied
            TransportError: If the function returned a malformed result
        """
        event = self._build_event(method.value, path, body, headers)

        start_time = time.monotonic()

        try:
            response = await asyncio.to_thread(
                self._lambda.invoke,
                FunctionName=self._function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(event),
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_msg = e.response.get("Error", {}).get("Message", str(e))

            if error_code in THROTTLING_ERROR_CODES:
                return Response(
                    payload=json.dumps({"error": error_msg}).encode("utf-8"),
                    status_code=503,
                )
            if error_code == "ResourceNotFoundException":
                raise LambdaInvocationError(
                    f"Lambda function not found: {self._function_name}", error_code
                ) from e
            if error_code == "AccessDeniedException":
                raise LambdaInvocationError(
                    f"Access denied to Lambda function: {self._function_name}. "
                    f"Ensure IAM policy includes lambda:InvokeFunction permission.",
                    error_code,
                ) from e
            raise LambdaInvocationError(f"Lambda invocation failed: {error_msg}", error_code) from e

        duration = time.monotonic() - start_time

        # Log potential cold starts
        if duration > self.COLD_START_THRESHOLD_SECONDS:
            logger.info(
                f"Lambda invocation took {duration:.2f}s (possible cold start)"
            )

        # CRITICAL: Read payload bytes ONCE - StreamingBody can only be read once
        payload_bytes = await asyncio.to_thread(response["Payload"].read)

        # Lambda execution errors (distinct from HTTP errors in the result)
        if "FunctionError" in response:
            logger.debug(
                "Lambda %s raised %s", self._function_name, response["FunctionError"]
            )
            return Response(payload=payload_bytes, status_code=500)

        try:
            payload = json.loads(payload_bytes)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransportError(f"Lambda returned invalid JSON: {e}") from e
        return self._to_response(payload)
