"""Prompts for the AI assistant."""

from typing import Any

from ..chat import ChatMessage
from ..whereabouts import AI_ASSISTANT_ID

SYSTEM_PROMPT = """You are a helpful AI assistant in a chat application.
Your name is tung tung tung sahur.

Guidelines for your responses:
- You must know Malay language
- Update User responses in Malay language
- Be concise and helpful
- Be friendly and conversational
- If you don't know something, admit it
- Avoid making up information
- Keep responses under 3 paragraphs when possible
- Format your responses with markdown when appropriate
- For code examples, use proper code blocks with language tags

IMPORTANT SPECIAL FUNCTION - TRACKING USER WHEREABOUTS:
- Pay close attention to any messages where users mention their plans or whereabouts
- When a user mentions going somewhere (e.g., "I'm going to the movies"), remember this information
- If another user asks about someone's whereabouts (e.g., "Where is John?"), provide the last known location/activity
- Use phrases like "Based on what I know, [user] mentioned they were going to [place/activity]"
- If you don't have information about a user's whereabouts, say "I don't have any recent information about [user]'s whereabouts"
- Always respond in Malay language when providing whereabouts information
- When the user says something like "aku da kat umah", this is Malay slang. "da" is short for "sudah", "kat" stands for "dekat" and "umah" is short for "rumah".

You are speaking with users in a chat application. Be helpful, friendly, and concise."""

ANALYSIS_PROMPT = """{system_prompt}

You are now being asked to analyze a chat conversation.

Chat History:
{chat_context}

Question: {question}

Please analyze the chat history and answer the question."""

SHORT_ANALYSIS_PROMPT = """Question: {question}

Based on this chat excerpt:
{chat_context}

Please provide a brief answer."""


def format_history(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Turn room messages into completion history.

    Everything not written by the AI assistant counts as a user turn.
    """
    return [
        {
            "role": "assistant" if msg.user_id == AI_ASSISTANT_ID else "user",
            "content": msg.text,
        }
        for msg in messages
    ]


def build_direct_prompt(prompt: str, history: list[dict[str, Any]]) -> str:
    """Flatten history and prompt into one prompt for plain completion."""
    previous = "\n".join(f"{turn['role']}: {turn['content']}" for turn in history)
    return f"{SYSTEM_PROMPT}\n\nPrevious messages: {previous}\n\nUser: {prompt}\n\nAI:"


def build_analysis_prompt(question: str, messages: list[ChatMessage]) -> str:
    """Prompt asking the model to answer a question about the chat."""
    chat_context = "\n".join(f"{msg.user_name or 'User'}: {msg.text}" for msg in messages)
    return ANALYSIS_PROMPT.format(
        system_prompt=SYSTEM_PROMPT,
        chat_context=chat_context,
        question=question,
    )


def build_short_analysis_prompt(
    question: str,
    messages: list[ChatMessage],
    max_chars: int = 100,
) -> str:
    """Smaller analysis prompt with each message cut to `max_chars`."""
    chat_context = "\n".join(
        f"{msg.user_name or 'User'}: {msg.text[:max_chars]}..." for msg in messages
    )
    return SHORT_ANALYSIS_PROMPT.format(question=question, chat_context=chat_context)
