"""HTTP client for the external benefit calculator.

Requests carry an explicit timeout and are retried a bounded number of
times with linear backoff. Every failure surfaces as ExternalServiceError;
callers never see httpx or pydantic exceptions.
"""

import asyncio
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from eligibility_agents.config import ReconciliationConfig
from eligibility_agents.interfaces.base import (
    ExternalCalculationRequest,
    ExternalCalculationResponse,
)
from eligibility_core.exceptions import ExternalServiceError

logger = structlog.get_logger()

SERVICE_NAME = "external-calculator"
CALCULATE_PATH = "/v1/calculate"


class ExternalCalculatorClient:
    """
    httpx implementation of the ExternalCalculator protocol.

    Args:
        config: Base URL, credentials, timeout and retry settings
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
    """

    def __init__(
        self,
        config: Optional[ReconciliationConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ReconciliationConfig()
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def calculate(
        self, request: ExternalCalculationRequest
    ) -> ExternalCalculationResponse:
        """POST the household and return the parsed determination.

        Timeouts, transport errors and 5xx responses are retried; 4xx
        responses and malformed bodies are not.

        Raises:
            ExternalServiceError: After the last attempt fails
        """
        payload = request.model_dump(mode="json")
        attempts = self.config.max_retries + 1
        last_error: Optional[str] = None

        async with httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers=self._headers(),
            transport=self._transport,
        ) as client:
            for attempt in range(attempts):
                try:
                    response = await client.post(CALCULATE_PATH, json=payload)
                    response.raise_for_status()
                    return ExternalCalculationResponse.model_validate(response.json())
                except httpx.TimeoutException as e:
                    last_error = f"timeout: {e.__class__.__name__}"
                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    last_error = f"HTTP {status}"
                    if status < 500:
                        break
                except httpx.TransportError as e:
                    last_error = f"transport: {e.__class__.__name__}"
                except (ValidationError, ValueError) as e:
                    last_error = f"malformed response: {e.__class__.__name__}"
                    break

                logger.warning(
                    "external_calculator_attempt_failed",
                    program=request.program,
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    error=last_error,
                )
                if attempt + 1 < attempts:
                    await asyncio.sleep(self.config.retry_backoff * (attempt + 1))

        raise ExternalServiceError(
            f"External calculator failed for {request.program}: {last_error}",
            service=SERVICE_NAME,
            operation="calculate",
            api_error=last_error,
        )
