"""Command engine: grammar, resolution, placement and execution."""

from chartvoice.commands.executor import VoiceCommandEngine  # noqa: F401
from chartvoice.commands.grammar import parse  # noqa: F401
