"""Tests for GroqLLMClient."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from wheredunno.assistant import GroqLLMClient


def make_groq(content) -> MagicMock:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content

    mock_groq = MagicMock()
    mock_groq.chat.completions.create = AsyncMock(return_value=mock_response)
    return mock_groq


class TestGroqLLMClient:
    def test_default_model(self) -> None:
        client = GroqLLMClient(MagicMock())
        assert client.model == "llama-3.1-70b-versatile"

    def test_stores_model(self) -> None:
        client = GroqLLMClient(MagicMock(), model="test-model")
        assert client.model == "test-model"

    @pytest.mark.asyncio
    async def test_complete_with_prompt_only(self) -> None:
        mock_groq = make_groq("LLM response")
        client = GroqLLMClient(mock_groq, model="test-model")

        result = await client.complete("Hello")

        assert result == "LLM response"
        mock_groq.chat.completions.create.assert_called_once_with(
            model="test-model",
            messages=[{"role": "user", "content": "Hello"}],
            temperature=0.7,
            top_p=0.95,
            max_tokens=1000,
        )

    @pytest.mark.asyncio
    async def test_complete_with_history_and_system(self) -> None:
        mock_groq = make_groq("Jawapan")
        client = GroqLLMClient(mock_groq)
        history = [
            {"role": "user", "content": "hai"},
            {"role": "assistant", "content": "hai juga"},
        ]

        await client.complete("apa khabar?", history=history, system="Be nice")

        messages = mock_groq.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "Be nice"},
            {"role": "user", "content": "hai"},
            {"role": "assistant", "content": "hai juga"},
            {"role": "user", "content": "apa khabar?"},
        ]

    @pytest.mark.asyncio
    async def test_complete_returns_empty_on_none_content(self) -> None:
        client = GroqLLMClient(make_groq(None))
        assert await client.complete("Hello") == ""

    @pytest.mark.asyncio
    async def test_complete_propagates_errors(self) -> None:
        mock_groq = MagicMock()
        mock_groq.chat.completions.create = AsyncMock(side_effect=Exception("API error"))
        client = GroqLLMClient(mock_groq)

        with pytest.raises(Exception, match="API error"):
            await client.complete("Hello")
