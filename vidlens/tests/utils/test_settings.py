from vidlens.config import FrameExtractionConfig, HunyuanConfig, LoggingConfig, VidlensConfig
from vidlens.custom_logger import LoggerManager


def test_hunyuan_config_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("HUNYUAN_SECRET_ID", "env-id-0001")
    monkeypatch.setenv("HUNYUAN_SECRET_KEY", "env-key")
    monkeypatch.setenv("HUNYUAN_REQUEST_INTERVAL_SECONDS", "0.5")

    config = HunyuanConfig()
    assert config.has_credentials
    assert config.secret_key.get_secret_value() == "env-key"
    assert "env-key" not in repr(config)
    assert config.request_interval_seconds == 0.5
    assert config.region == "ap-beijing"


def test_hunyuan_config_without_credentials():
    assert not HunyuanConfig().has_credentials


def test_frame_config_defaults(monkeypatch):
    monkeypatch.setenv("FRAMES_FAILURE_THRESHOLD", "5")
    config = FrameExtractionConfig()
    assert config.failure_threshold == 5
    assert config.analysis_quality == 85
    assert config.output_dir == "./temp_frames"


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("HUNYUAN_VISION_MODEL=hunyuan-vision-pro\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HUNYUAN_VISION_MODEL", raising=False)
    assert HunyuanConfig().vision_model == "hunyuan-vision-pro"


def test_sections_are_built_lazily():
    config = VidlensConfig()
    assert config._hunyuan is None
    assert config.hunyuan is config.hunyuan
    assert config.frames.failure_threshold == 3


def test_logger_manager_configure_is_idempotent(tmp_path):
    manager = LoggerManager()
    log_file = tmp_path / "vidlens.log"
    config = LoggingConfig(level="debug", enable_file_logging=True, log_file=str(log_file))

    manager.configure(config)
    first_console = manager.console_sink_id
    manager.configure(config)

    assert manager.console_sink_id is not None
    assert manager.console_sink_id != first_console
    assert manager.file_sink_id is not None
    manager.disable_file()
    manager.disable_console()
    assert manager.file_sink_id is None
