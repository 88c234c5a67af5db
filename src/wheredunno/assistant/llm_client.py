"""Text completion client backed by Groq.

Wraps AsyncGroq so the rest of the app only depends on a small
`complete(prompt, history, system)` contract.
"""

from typing import Any

from groq import AsyncGroq


class GroqLLMClient:
    """Completion client that wraps AsyncGroq.

    Example:
        from groq import AsyncGroq
        from wheredunno.assistant import GroqLLMClient

        groq = AsyncGroq(api_key="...")
        llm = GroqLLMClient(groq, model="llama-3.1-70b-versatile")
        text = await llm.complete("Hai!", history=[{"role": "user", "content": "..."}])
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = "llama-3.1-70b-versatile",
        temperature: float = 0.7,
        top_p: float = 0.95,
        max_tokens: int = 1000,
    ) -> None:
        """Initialize the Groq client wrapper.

        Args:
            client: The AsyncGroq client instance to wrap.
            model: The model to use for completions.
            temperature: Sampling temperature.
            top_p: Nucleus sampling cutoff.
            max_tokens: Maximum tokens in a completion.
        """
        self._client = client
        self._model = model
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens

    async def complete(
        self,
        prompt: str,
        history: list[dict[str, Any]] | None = None,
        system: str | None = None,
    ) -> str:
        """Complete a prompt and return the text response.

        Args:
            prompt: The user prompt to complete.
            history: Earlier turns as `{"role", "content"}` dicts.
            system: Optional system prompt to set context.

        Returns:
            The LLM's text response.
        """
        messages: list[dict[str, Any]] = []

        if system:
            messages.append({"role": "system", "content": system})

        if history:
            messages.extend(history)

        messages.append({"role": "user", "content": prompt})

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            temperature=self.temperature,
            top_p=self.top_p,
            max_tokens=self.max_tokens,
        )

        return response.choices[0].message.content or ""

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model
