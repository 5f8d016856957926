"""AI providers: speech-to-text, chat completion, text-to-speech and moderation."""
