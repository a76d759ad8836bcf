"""
Model gateway for FSai.

Sends a prompt and the tool definitions to the model via LiteLLM and turns
the answer into a Proposal: response text plus risk-classified tool calls.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import litellm
from litellm import acompletion

from fsai.agent.parser import ToolCallParser
from fsai.config.schema import AgentConfig, Settings
from fsai.providers.exceptions import FailureType, UpstreamError, classify_error
from fsai.providers.models import CompletionResponse, Message, Proposal, TokenUsage
from fsai.tools.models import MediaPayload
from fsai.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Configure LiteLLM defaults
litellm.drop_params = True  # Drop unsupported params per-provider

NOT_CONFIGURED_TEXT = "AI is not configured. Please set the API key in settings."
INITIAL_FALLBACK_TEXT = "I can help you with file operations."
FOLLOWUP_FALLBACK_TEXT = "I have processed the tool results but cannot provide a response."


class ModelGateway:
    """
    Single entry point for model calls.

    Settings are passed in on every call and never cached, so a credential
    saved mid-session takes effect on the next request. Failures are not
    retried.
    """

    def __init__(self, config: AgentConfig, registry: ToolRegistry):
        """
        Initialize the gateway.

        Args:
            config: Agent configuration (model, temperature, timeout).
            registry: Registry providing the tool definitions.
        """
        self.config = config
        self.registry = registry

    def _extract_provider(self, model: str) -> str:
        """Extract provider name from model string."""
        if "/" in model:
            return model.split("/")[0]
        return "unknown"

    def tool_definitions(self, settings: Settings) -> list[dict[str, Any]]:
        """Tools offered to the model under the given settings."""
        return self.registry.get_tool_definitions(
            multimedia_support=settings.multimedia_support
        )

    async def propose(
        self,
        system_prompt: str,
        prompt_text: str,
        settings: Settings,
        *,
        attachments: Sequence[MediaPayload] = (),
        followup: bool = False,
        taken_ids: set[str] | None = None,
    ) -> Proposal:
        """
        Ask the model for a response and tool proposals.

        Args:
            system_prompt: Fixed assistant instructions.
            prompt_text: Request text including the directory context.
            settings: Settings snapshot (credential, multimedia support).
            attachments: Media loaded by earlier tool calls.
            followup: Whether this re-prompts with tool results.
            taken_ids: Tool call ids already issued in this turn.

        Returns:
            Proposal with text and parsed tool calls.

        Raises:
            UpstreamError: If the model call fails or times out.
        """
        if not settings.is_configured:
            logger.warning("Model call skipped: no credential configured")
            return Proposal(text=NOT_CONFIGURED_TEXT, not_configured=True)

        messages = [
            Message.system(system_prompt),
            Message.user(prompt_text, [a.data_url() for a in attachments]),
        ]

        response = await self.complete(
            messages,
            credential=settings.credential,
            tools=self.tool_definitions(settings),
        )

        data = response.model_dump()
        tool_calls = ToolCallParser.parse_response(data, taken_ids)
        text = ToolCallParser.extract_text_content(data).strip()

        if not text:
            text = FOLLOWUP_FALLBACK_TEXT if followup else INITIAL_FALLBACK_TEXT

        logger.info(f"Model proposed {len(tool_calls)} tool call(s)")
        return Proposal(text=text, tool_calls=tool_calls, usage=response.usage)

    async def complete(
        self,
        messages: list[Message],
        *,
        credential: str,
        tools: list[dict[str, Any]] | None = None,
    ) -> CompletionResponse:
        """
        Send a completion request.

        Raises:
            UpstreamError: If the call fails or exceeds ``timeout_per_call``.
        """
        model = self.config.model
        logger.info(f"Completing with model: {model}")

        request_kwargs: dict[str, Any] = {
            "model": model,
            "messages": [msg.to_dict() for msg in messages],
            "temperature": self.config.temperature,
            "api_key": credential,
            "timeout": self.config.timeout_per_call,
        }
        if tools:
            request_kwargs["tools"] = tools

        try:
            response = await asyncio.wait_for(
                acompletion(**request_kwargs),
                timeout=self.config.timeout_per_call,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"Model call timed out after {self.config.timeout_per_call}s",
                provider=self._extract_provider(model),
                failure_type=classify_error(e),
            ) from e
        except Exception as e:
            failure = classify_error(e)
            logger.error(f"Model call failed ({failure.value}): {e}")
            raise UpstreamError(
                str(e),
                provider=self._extract_provider(model),
                failure_type=failure,
            ) from e

        try:
            return self._parse_response(response, model)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed model response: {e!r}")
            raise UpstreamError(
                f"Malformed response from model: {e!r}",
                provider=self._extract_provider(model),
                failure_type=FailureType.UNKNOWN,
            ) from e

    def _parse_response(self, response: Any, model: str) -> CompletionResponse:
        """Parse a LiteLLM response into content blocks."""
        message = response.choices[0].message
        blocks: list[dict[str, Any]] = []

        if isinstance(message.content, list):
            blocks.extend(message.content)
        elif message.content:
            blocks.append({"type": "text", "text": message.content})

        # OpenAI-style tool calls, converted to tool_use blocks
        for tool_call in getattr(message, "tool_calls", None) or []:
            blocks.append(
                {
                    "type": "tool_use",
                    "id": tool_call.id,
                    "name": tool_call.function.name,
                    "input": tool_call.function.arguments,
                }
            )

        usage = getattr(response, "usage", None)
        return CompletionResponse(
            content=blocks,
            model=model,
            usage=TokenUsage(
                input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            ),
            finish_reason=response.choices[0].finish_reason or "unknown",
        )
