"""LLM chat client and conversation state."""
