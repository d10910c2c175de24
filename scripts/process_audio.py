"""Transcribe an MP3 and generate a document from the command line.

Usage: python scripts/process_audio.py path/to/audio.mp3 [mode] [custom instructions]
"""

import asyncio
import os
import sys

# Add project root to path so we can import audio_processor
sys.path.append(os.getcwd())

from audio_processor.config.settings import ensure_credentials, settings
from audio_processor.domain.models import ProcessingMode, SessionState
from audio_processor.errors import AudioProcessorError
from audio_processor.pipelines.ingestion import MP3_CONTENT_TYPE
from audio_processor.controllers.dependencies import get_session_use_cases


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/process_audio.py path/to/audio.mp3 [mode] [instructions]")
        print("Modes: " + ", ".join(mode.value for mode in ProcessingMode))
        return 1

    file_path = sys.argv[1]
    mode = ProcessingMode(sys.argv[2]) if len(sys.argv) > 2 else ProcessingMode.SUMMARY
    instructions = sys.argv[3] if len(sys.argv) > 3 else None

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return 1

    ensure_credentials(settings)
    use_cases = get_session_use_cases()

    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    print(f"Transcribing {len(audio_bytes)} bytes with provider '{settings.ai_provider}'...")
    try:
        session = await use_cases.create()
        session = await use_cases.upload_audio(session.id, audio_bytes, MP3_CONTENT_TYPE)
        if session.state is not SessionState.READY_TO_PROCESS:
            print(f"\nTranscription Error: {session.error}")
            return 1

        print(f"Generating '{mode.label}' document...")
        session = await use_cases.generate_document(session.id, mode, instructions)
    except AudioProcessorError as e:
        print(f"\nError: {e.message}")
        return 1

    if session.state is not SessionState.COMPLETE:
        print(f"\nGeneration Error: {session.error}")
        return 1

    print("\n--- Document ---")
    print(session.document)
    print("----------------")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
