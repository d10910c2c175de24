#!/usr/bin/env python3
"""
Run script for the Audio Processor AI backend
"""
import uvicorn

from audio_processor.config.settings import settings
from audio_processor.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
