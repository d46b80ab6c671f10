import pytest

from segmenter.config import CONFIG_ENV_VAR, Settings, load_settings
from segmenter.errors import ConfigError


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    settings = load_settings()

    assert settings.chunk_threshold == 200
    assert settings.split_policy == "halve"
    assert settings.on_bad_row == "abort"
    assert settings.brand_table().get("Bowlero", "Retail").center_field == "412"
    assert settings.center_map().resolve("Lucky Strike") == "Lucky Strike"


def test_yaml_file_overrides(tmp_path):
    path = tmp_path / "segmenter.yaml"
    path.write_text(
        "\n".join(
            [
                "output_dir: build/segments",
                "split_policy: bounded",
                "on_bad_row: skip",
                "categories: [League]",
                "centers:",
                "  AMF Plano: AMF",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(str(path))

    assert settings.output_dir == "build/segments"
    assert settings.split_policy == "bounded"
    assert settings.categories == ["League"]
    assert settings.center_map().resolve(" AMF Plano ") == "AMF"
    assert settings.center_map().resolve("Bowlero") == "Bowlero"


def test_env_var_points_at_file(tmp_path, monkeypatch):
    path = tmp_path / "c.yaml"
    path.write_text("chunk_threshold: 50\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_settings().chunk_threshold == 50


def test_custom_brand_table(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("brands:\n  Test:\n    Retail: {pref: 1, center: 2, unsub: 3}\n", encoding="utf-8")

    settings = load_settings(str(path))

    assert settings.brand_table().brands() == ["Test"]
    assert settings.center_map().resolve("Bowlero") is None


@pytest.mark.parametrize(
    "content",
    ["split_policy: thirds\n", "chunk_threshold: 0\n", "- a\n- b\n", "brands: {AMF: {Retail: {pref: 1}}}\n"],
)
def test_invalid_settings(tmp_path, content):
    path = tmp_path / "c.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(str(path)).brand_table()


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(str(tmp_path / "absent.yaml"))


def test_settings_are_plain_models():
    assert Settings(categories=["Retail"]).categories == ["Retail"]
