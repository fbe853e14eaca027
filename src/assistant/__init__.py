"""Scripted voice and chat assistant responses."""

from .responder import (
    CHAT_REPLIES,
    AssistantAction,
    AssistantReply,
    ChatMessage,
    VoiceCommand,
    chat_reply,
    respond_to_voice_command,
)

__all__ = [
    "CHAT_REPLIES",
    "AssistantAction",
    "AssistantReply",
    "ChatMessage",
    "VoiceCommand",
    "chat_reply",
    "respond_to_voice_command",
]
