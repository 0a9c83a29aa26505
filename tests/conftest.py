import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the user's real config and credentials."""
    for var in ("IGQ_API_KEY", "IGQ_BASE_URL", "IGQ_CONFIG_DIR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("igq.config.DEFAULT_CONFIG_DIR", tmp_path / "home-igq")
