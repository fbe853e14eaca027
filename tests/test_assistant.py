"""
Tests for the scripted voice and chat assistant.
"""

import random

import pytest

from src.assistant import CHAT_REPLIES, AssistantAction, chat_reply, respond_to_voice_command
from src.dashboard import get_dashboard
from src.storage import SAMPLE_USER_ID, create_entity_store


@pytest.fixture
def dashboard():
    return get_dashboard(create_entity_store(seed=True), SAMPLE_USER_ID)


# ============================================================================
# Voice Commands
# ============================================================================


def test_help(dashboard):
    reply = respond_to_voice_command("What can you do?", dashboard)

    assert reply.response.startswith("I can help you with")
    assert reply.action is None


@pytest.mark.parametrize("command", ["submit claim", "I want to file claim", "NEW CLAIM please"])
def test_submit_claim_opens_form(command, dashboard):
    reply = respond_to_voice_command(command, dashboard)

    assert reply.action == AssistantAction.OPEN_CLAIM_FORM


def test_view_policy(dashboard):
    reply = respond_to_voice_command("show policy", dashboard)

    assert reply.action == AssistantAction.SHOW_POLICY


def test_claim_status_reads_dashboard(dashboard):
    reply = respond_to_voice_command("what's my claim status", dashboard)

    assert reply.response == "You have 1 active claims. Your most recent claim is under_review."


def test_coverage_reads_dashboard(dashboard):
    reply = respond_to_voice_command("how much coverage do I have", dashboard)

    assert reply.response == "You have used $2450.00 out of your $15000.00 total coverage."


def test_coverage_without_dashboard_uses_defaults():
    reply = respond_to_voice_command("coverage")

    assert reply.response == "You have used $0 out of your $15000 total coverage."


def test_pregnancy_week(dashboard):
    reply = respond_to_voice_command("How far along am I?", dashboard)

    assert reply.response.startswith("You are currently 24 weeks pregnant")


def test_claim_status_without_claims():
    reply = respond_to_voice_command("my claims")

    assert reply.response == "You have 0 active claims. Your most recent claim is none found."


def test_next_appointment():
    assert "ultrasound" in respond_to_voice_command("next appointment").response


def test_emergency():
    assert "911" in respond_to_voice_command("this is an emergency").response


def test_unrecognized_command():
    reply = respond_to_voice_command("sing me a song")

    assert reply.response.startswith("I didn't understand that command")
    assert reply.action is None


# ============================================================================
# Chat
# ============================================================================


def test_chat_reply_is_canned():
    reply = chat_reply("Is my ultrasound covered?", rng=random.Random(3))

    assert reply.response in CHAT_REPLIES


def test_chat_reply_reproducible_with_seeded_rng():
    first = chat_reply("hello", rng=random.Random(11))
    second = chat_reply("something else", rng=random.Random(11))

    assert first.response == second.response
