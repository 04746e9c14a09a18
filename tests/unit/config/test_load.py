import os
from pathlib import Path

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem

from repohistory.config import safe_load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("REPOHISTORY_"):
            monkeypatch.delenv(key)


class TestSafeLoadConfig:
    def test_returns_loaded_config(self, fs: FakeFilesystem) -> None:
        fs.create_file("/work/repohistory.toml", contents="[git]\nmax_parallel = 2\n")

        config, error = safe_load_config(search_from=Path("/work"))

        assert error is None
        assert config.git.max_parallel == 2

    def test_falls_back_to_defaults_with_warning(
        self, fs: FakeFilesystem, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fs.create_file("/work/repohistory.toml", contents="[git\n")

        config, error = safe_load_config(search_from=Path("/work"))

        assert error is not None
        assert error.startswith("Failed to load config:")
        assert config.git.max_parallel == 4
        assert capsys.readouterr().err.startswith("Warning: Failed to load config:")

    def test_invalid_value_falls_back(self, fs: FakeFilesystem) -> None:
        fs.create_file("/work/repohistory.toml", contents='[graph]\ndate_type = "never"\n')

        config, error = safe_load_config(search_from=Path("/work"))

        assert error is not None
        assert config.graph.date_type.value == "commit"

    def test_strict_mode_exits(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fs.create_file("/work/repohistory.toml", contents="[git\n")
        monkeypatch.setenv("REPOHISTORY_STRICT_CONFIG", "1")

        with pytest.raises(SystemExit) as exc_info:
            _ = safe_load_config(search_from=Path("/work"))

        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("Error: Failed to load config:")
