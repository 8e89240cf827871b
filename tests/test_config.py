from pkisig.config import Settings, get_settings, set_settings


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("PKISIG_DEFAULT_ALGORITHM", "sha512")
    monkeypatch.setenv("PKISIG_SIGNATURE_ENCODING", "base64")
    monkeypatch.setenv("PKISIG_LOG_LEVEL", "debug")

    settings = Settings(data_dir=tmp_path / "data")

    assert settings.default_algorithm == "sha512"
    assert settings.signature_encoding == "base64"
    assert settings.log_level == "DEBUG"


def test_report_path_under_data_dir(tmp_path):
    settings = Settings(data_dir=tmp_path / "data")

    report = settings.get_report_path()

    assert report.parent == tmp_path / "data"
    assert report.parent.is_dir()


def test_global_settings_override(tmp_path):
    custom = Settings(data_dir=tmp_path)
    set_settings(custom)
    try:
        assert get_settings() is custom
    finally:
        set_settings(None)
