"""
Scripted assistant responses.

The voice assistant maps spoken commands to canned replies by keyword and
reads figures from the user's dashboard. The chat assistant picks a canned
reply at random. Neither calls a language model.
"""

import logging
import random
from enum import Enum
from typing import Optional

from pydantic import Field

from ..claims.schema import CamelModel
from ..dashboard.aggregator import Dashboard

logger = logging.getLogger(__name__)


class AssistantAction(str, Enum):
    """UI action the front-end should trigger after speaking the reply."""
    OPEN_CLAIM_FORM = "open_claim_form"
    SHOW_POLICY = "show_policy"


class AssistantReply(CamelModel):
    response: str
    action: Optional[AssistantAction] = None


class VoiceCommand(CamelModel):
    user_id: str = Field(min_length=1)
    command: str


class ChatMessage(CamelModel):
    message: str = Field(min_length=1)


HELP_TEXT = (
    "I can help you with: submitting claims, viewing policy details, checking claim status, "
    "or answering questions about your coverage. Try saying 'submit claim', 'view policy', "
    "or 'claim status'."
)
FALLBACK_TEXT = (
    "I didn't understand that command. Try saying 'help' to hear what I can do, "
    "or try commands like 'submit claim', 'view policy', or 'claim status'."
)
NEXT_APPOINTMENT_TEXT = (
    "Your next appointment is an ultrasound scheduled for December 28th at Women's Health Center."
)
EMERGENCY_TEXT = (
    "For medical emergencies, call 911 immediately. For urgent care questions about your "
    "coverage, you can submit an emergency claim through the system."
)

# Shown when the dashboard has no policy or pregnancy week
DEFAULT_TOTAL_COVERAGE = "15000"
DEFAULT_PREGNANCY_WEEK = "24"

CHAT_REPLIES = [
    "Based on your policy, that service is covered at 100% after your deductible.",
    "I can help you submit a pre-authorization for that procedure. Would you like me to start the process?",
    "Your current pregnancy week qualifies you for additional prenatal screenings. Let me show you what's available.",
    "I found 3 in-network providers near you. Would you like me to check their availability?",
    "Your claim is currently under review. Typical processing time is 3-5 business days.",
]


def _mentions(command: str, *phrases: str) -> bool:
    return any(phrase in command for phrase in phrases)


def respond_to_voice_command(command: str, dashboard: Optional[Dashboard] = None) -> AssistantReply:
    """
    Answer a transcribed voice command.

    Keyword groups are checked in order; the first match wins.

    Args:
        command: Transcribed command, any case
        dashboard: The speaker's dashboard, used for claim and coverage figures
    """
    text = command.lower().strip()

    if _mentions(text, "help", "what can you do"):
        return AssistantReply(response=HELP_TEXT)

    if _mentions(text, "submit claim", "new claim", "file claim"):
        return AssistantReply(
            response="Opening the claim submission form for you.",
            action=AssistantAction.OPEN_CLAIM_FORM,
        )

    if _mentions(text, "view policy", "show policy", "policy details"):
        return AssistantReply(response="Showing your policy details.", action=AssistantAction.SHOW_POLICY)

    if _mentions(text, "claim status", "my claims"):
        active = dashboard.stats.active_claims if dashboard else 0
        latest = dashboard.claims[0].status.value if dashboard and dashboard.claims else "none found"
        return AssistantReply(
            response=f"You have {active} active claims. Your most recent claim is {latest}."
        )

    if _mentions(text, "coverage"):
        policy = dashboard.policy if dashboard else None
        used = dashboard.stats.coverage_used if dashboard else "0"
        total = f"{policy.total_coverage:.2f}" if policy else DEFAULT_TOTAL_COVERAGE
        return AssistantReply(response=f"You have used ${used} out of your ${total} total coverage.")

    if _mentions(text, "pregnancy", "how far along"):
        week = (dashboard.user.pregnancy_week if dashboard else None) or DEFAULT_PREGNANCY_WEEK
        return AssistantReply(
            response=f"You are currently {week} weeks pregnant. Your due date is approaching!"
        )

    if _mentions(text, "next appointment", "upcoming appointment"):
        return AssistantReply(response=NEXT_APPOINTMENT_TEXT)

    if _mentions(text, "emergency", "urgent care"):
        return AssistantReply(response=EMERGENCY_TEXT)

    logger.debug(f"Unrecognized voice command: {command!r}")
    return AssistantReply(response=FALLBACK_TEXT)


def chat_reply(message: str, rng: Optional[random.Random] = None) -> AssistantReply:
    """Pick a canned chat reply. The message content is not interpreted."""
    rng = rng or random
    return AssistantReply(response=rng.choice(CHAT_REPLIES))
