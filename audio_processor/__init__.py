"""Audio Processor AI: transcribe MP3 uploads and turn them into structured documents."""

__version__ = "1.0.0"
