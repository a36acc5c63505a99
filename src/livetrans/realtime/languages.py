# realtime/languages.py
"""
Supported source languages and realtime session configuration.
"""

DEFAULT_LANGUAGE = "nl"
DEFAULT_TARGET_LANGUAGE = "English"

SOURCE_LANGUAGES = {
    "nl": "Dutch",
    "sr": "Serbian",
    "de": "German",
    "en": "English",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "tr": "Turkish",
    "pl": "Polish",
    "uk": "Ukrainian",
    "vi": "Vietnamese",
    "th": "Thai",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "he": "Hebrew",
    "id": "Indonesian",
    "ms": "Malay",
    "cs": "Czech",
    "ro": "Romanian",
    "hu": "Hungarian",
    "sk": "Slovak",
    "hr": "Croatian",
    "ca": "Catalan",
    "is": "Icelandic",
}

INSTRUCTIONS = """You are a translator from the user's language to {lang}. For each response, output ONLY the literal translation of the MOST RECENT phrase (the last thing the user said) into {lang}. One phrase in, one short translation out. Do not combine or summarize multiple phrases.

Rules:
- Translate ONLY the most recent user utterance. One response = one phrase translated.
- NEVER invent or guess. Output only the translation of what was actually said.
- Output ONLY the {lang} translation. No extra words, no added politeness unless it was in the original."""


def normalize_language(code: str | None) -> str:
    """Return a supported language code, falling back to the default."""
    if not isinstance(code, str):
        return DEFAULT_LANGUAGE
    code = code.strip().lower()
    return code if code in SOURCE_LANGUAGES else DEFAULT_LANGUAGE


def language_name(code: str) -> str:
    return SOURCE_LANGUAGES.get(code, "Source")


def build_instructions(target_language: str = DEFAULT_TARGET_LANGUAGE) -> str:
    return INSTRUCTIONS.format(lang=target_language)


def build_session_config(
    language: str,
    target_language: str = DEFAULT_TARGET_LANGUAGE,
    model: str = "gpt-realtime",
    transcription_model: str = "gpt-4o-transcribe",
) -> dict:
    """
    Build the realtime session object.

    Server VAD still segments the input into phrases, but automatic responses
    are off: each finalized phrase triggers its own response.create instead.

    Args:
        language: Source language code (normalized here)
        target_language: Language name the model translates into
        model: Realtime model
        transcription_model: Input transcription model

    Returns:
        Session dict for client_secrets / session.update
    """
    return {
        "type": "realtime",
        "model": model,
        "instructions": build_instructions(target_language),
        "audio": {
            "input": {
                "format": {"type": "audio/pcm", "rate": 24000},
                "transcription": {
                    "model": transcription_model,
                    "language": normalize_language(language),
                },
                "turn_detection": {
                    "type": "server_vad",
                    "create_response": False,
                },
            },
        },
    }
