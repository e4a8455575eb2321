import pytest

from utils.settings import load_settings


def test_defaults(monkeypatch, tmp_path):
    for name in ("BATCH_SIZE", "DELAY_BETWEEN_REQUESTS_MS", "DELAY_BETWEEN_BATCHES_MS", "RETENTION_HOURS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ANALYSIS_DIR", str(tmp_path / "out"))

    settings = load_settings()

    assert settings.batch_size == 5
    assert settings.delay_between_requests == 0.5
    assert settings.delay_between_batches == 2.0
    assert settings.retention_seconds == 24 * 3600
    assert settings.max_upload_files == 50
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.analysis_dir == tmp_path / "out"
    assert not settings.is_production


def test_overrides(monkeypatch):
    monkeypatch.setenv("BATCH_SIZE", "3")
    monkeypatch.setenv("DELAY_BETWEEN_BATCHES_MS", "0")
    monkeypatch.setenv("APP_ENV", "Production")

    settings = load_settings()

    assert settings.batch_size == 3
    assert settings.delay_between_batches == 0.0
    assert settings.is_production


@pytest.mark.parametrize("value", ["five", "0"])
def test_invalid_batch_size(monkeypatch, value):
    monkeypatch.setenv("BATCH_SIZE", value)
    with pytest.raises(RuntimeError):
        load_settings()


def test_analysis_dir_pointing_at_file(monkeypatch, tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    monkeypatch.setenv("ANALYSIS_DIR", str(target))
    with pytest.raises(RuntimeError):
        load_settings()
