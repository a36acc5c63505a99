from livetrans.realtime.languages import (
    DEFAULT_LANGUAGE,
    SOURCE_LANGUAGES,
    build_instructions,
    build_session_config,
    language_name,
    normalize_language,
)


def test_normalize_language() -> None:
    assert normalize_language(" DE ") == "de"
    assert normalize_language("sr") == "sr"
    assert normalize_language("xx") == DEFAULT_LANGUAGE
    assert normalize_language("") == DEFAULT_LANGUAGE
    assert normalize_language(None) == DEFAULT_LANGUAGE
    assert normalize_language(5) == DEFAULT_LANGUAGE


def test_language_table() -> None:
    assert len(SOURCE_LANGUAGES) == 34
    assert language_name("nl") == "Dutch"
    assert language_name("xx") == "Source"


def test_instructions_mention_target_language() -> None:
    text = build_instructions("German")
    assert "German" in text
    assert "MOST RECENT phrase" in text


def test_session_config_shape() -> None:
    config = build_session_config("FR", target_language="English", model="m", transcription_model="t")
    assert config["type"] == "realtime"
    assert config["model"] == "m"
    transcription = config["audio"]["input"]["transcription"]
    assert transcription == {"model": "t", "language": "fr"}
    assert config["audio"]["input"]["turn_detection"]["create_response"] is False
    assert "English" in config["instructions"]
