import json

from boxexplorer.core.annotation import AiConfig
from boxexplorer.utils.settings_store import SettingsStore, ViewerSettings, document_fingerprint


def test_defaults_when_nothing_is_stored(tmp_path):
    store = SettingsStore(tmp_path)

    settings = store.load_settings()
    assert settings == ViewerSettings()
    assert store.load_last_opened_path() is None
    assert store.load_last_reading_page("/tmp/a.pdf") is None
    assert store.load_doc_state("abc") is None
    assert store.load_ai_config() == {}


def test_settings_roundtrip_with_camel_case_keys(tmp_path):
    store = SettingsStore(tmp_path)
    settings = ViewerSettings(mode="scroll", theme="dark", scale_mode="manual", manual_scale=2.0)

    assert store.save_settings(settings) is True
    raw = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert raw["scaleMode"] == "manual"
    assert raw["manualScale"] == 2.0
    assert store.load_settings() == settings


def test_invalid_stored_values_fall_back_to_defaults(tmp_path):
    (tmp_path / "settings.json").write_text(
        json.dumps({"mode": "grid", "theme": "neon", "manualScale": "big", "unknown": 1}),
        encoding="utf-8",
    )

    settings = SettingsStore(tmp_path).load_settings()
    assert settings.mode == "single"
    assert settings.theme == "sepia"
    assert settings.manual_scale == 1.2


def test_corrupt_file_is_ignored(tmp_path):
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    assert SettingsStore(tmp_path).load_settings() == ViewerSettings()


def test_doc_state_is_keyed_by_document(tmp_path):
    store = SettingsStore(tmp_path)
    store.save_doc_state("a", {"lastPage": 3})
    store.save_doc_state("b", {"lastPage": 7})

    assert store.load_doc_state("a") == {"lastPage": 3}
    assert store.load_doc_state("b") == {"lastPage": 7}
    assert store.save_doc_state(None, {}) is False


def test_reading_page_per_path(tmp_path):
    store = SettingsStore(tmp_path)
    store.save_last_reading_page("/docs/a.pdf", 4)
    store.save_last_reading_page("/docs/b.pdf", 0)

    assert store.load_last_reading_page("/docs/a.pdf") == 4
    assert store.load_last_reading_page("/docs/b.pdf") == 1
    assert store.save_last_reading_page("  ", 2) is False


def test_last_opened_path(tmp_path):
    store = SettingsStore(tmp_path)
    store.save_last_opened_path("/docs/a.pdf")
    assert store.load_last_opened_path() == "/docs/a.pdf"


def test_unwritable_directory_reports_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = SettingsStore(blocker / "config")

    assert store.save_settings(ViewerSettings()) is False


def test_fingerprint_is_stable():
    assert document_fingerprint(b"abc") == document_fingerprint(b"abc")
    assert document_fingerprint(b"abc") != document_fingerprint(b"abd")


def test_ai_config_from_stored_record():
    config = AiConfig.from_dict({"model": "m", "api_key": "k", "temperature": "", "max_tokens": "12", "extra": 1})

    assert config.model == "m"
    assert config.base_url == "https://api.openai.com/v1"
    assert config.temperature is None
    assert config.max_tokens == 12
    assert config.is_complete
    assert AiConfig.from_dict(None) == AiConfig()
    assert not AiConfig().is_complete
