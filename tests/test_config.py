import json

from cryptorand.config import DEFAULTS, Config


def test_defaults_without_file(tmp_path):
    config = Config(tmp_path / "missing.json")
    assert config.get("entropy", "source") == "system"
    assert config.get("string", "length") == 32
    assert config.get("nope", "key") is None


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"string": {"length": 12}}))
    config = Config(path)
    assert config.get("string", "length") == 12
    assert config.get("string", "charset") == "alnum"


def test_invalid_json_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert Config(path).get("check", "samples") == 10000


def test_non_object_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    assert Config(path).get("entropy", "source") == "system"


def test_set_and_save(tmp_path):
    path = tmp_path / "sub" / "config.json"
    config = Config(path)
    config.set("string", "charset", "hex")
    config.set("extra", "flag", True)
    config.save()

    reloaded = Config(path)
    assert reloaded.get("string", "charset") == "hex"
    assert reloaded.get("extra", "flag") is True


def test_defaults_not_mutated(tmp_path):
    config = Config(tmp_path / "c.json")
    config.set("string", "length", 99)
    assert DEFAULTS["string"]["length"] == 32
