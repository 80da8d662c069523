"""OpenAI Chat Completions Client"""

import json
import http.client
import socket
import urllib.request
import urllib.error

from autocommit.config import Config
from autocommit.llm.base import LLMResponse, LLMError


class OpenAIClient:
    """Chat-completion client. One request per call, no retries."""

    ENDPOINT = "https://api.openai.com/v1/chat/completions"

    def __init__(self, config: Config, endpoint: str | None = None):
        if not config.api_key:
            raise LLMError("No API key configured")
        self.config = config
        self.model = config.model
        self.endpoint = endpoint or self.ENDPOINT

    @property
    def name(self) -> str:
        return f"OpenAI ({self.model})"

    def build_payload(self, messages: list[dict]) -> dict:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    def _call_api(self, messages: list[dict]) -> dict:
        """POST the chat request and return the decoded JSON body."""
        data = json.dumps(self.build_payload(messages)).encode('utf-8')
        req = urllib.request.Request(
            self.endpoint,
            data=data,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            },
        )

        with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def generate(self, messages: list[dict]) -> LLMResponse:
        """Send messages and return the first choice's trimmed content."""
        timeout_msg = f"Request timed out after {self.config.timeout:g}s"
        try:
            result = self._call_api(messages)
        except urllib.error.HTTPError as e:
            raise LLMError(f"API request failed: {e.code} {e.reason}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise LLMError(timeout_msg)
            raise LLMError(f"API request failed: {e.reason}")
        except socket.timeout:
            raise LLMError(timeout_msg)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise LLMError("Invalid response from API: body is not UTF-8 JSON")
        except http.client.HTTPException as e:
            raise LLMError(f"Incomplete response from API: {e}")
        except OSError as e:
            raise LLMError(f"Connection to API lost: {e}")

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise LLMError("Invalid response from API: no message content in choices")
        if not isinstance(content, str):
            raise LLMError("Invalid response from API: no message content in choices")

        usage = result.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        return LLMResponse(
            content=content.strip(),
            model=result.get("model", self.model),
            tokens_used=usage.get("total_tokens", 0),
        )
