"""OpenAI chat completion client for generated credit plans"""

import openai
from credit_health.config import settings
from credit_health.domain.exceptions import ExternalServiceError
from credit_health.infrastructure.observability.metrics import text_generation_latency_histogram


class TextGenerationClient:
    """Client for the external generative text service"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self.max_tokens = max_tokens or settings.plan_max_tokens
        self.temperature = settings.plan_temperature if temperature is None else temperature

    async def complete(self, system_instruction: str, user_prompt: str) -> str | None:
        """
        Single JSON-mode chat completion request.

        No retries: the SDK's own retry loop is disabled so a failure
        surfaces within one timeout.

        Raises:
            ExternalServiceError: Not configured, or any SDK failure (timeout,
                connection, HTTP status, unparseable response)
        """
        if not self.api_key:
            raise ExternalServiceError("Text generation service is not configured")

        client = openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        try:
            with text_generation_latency_histogram.time():
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system_instruction},
                        {"role": "user", "content": user_prompt},
                    ],
                    response_format={"type": "json_object"},
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
        except openai.APITimeoutError as e:
            raise ExternalServiceError(f"Text generation timeout after {self.timeout}s") from e
        except openai.APIConnectionError as e:
            raise ExternalServiceError("Text generation service unreachable") from e
        except openai.APIStatusError as e:
            raise ExternalServiceError(f"Text generation service error: {e.status_code}") from e
        except openai.OpenAIError as e:
            raise ExternalServiceError(f"Text generation request failed: {type(e).__name__}") from e
        finally:
            await client.close()

        if not response.choices:
            return None
        return response.choices[0].message.content
