from campus2prolog.config import Config


def test_defaults():
    cfg = Config.default()
    assert cfg.grid.prolog_increment == 1
    assert cfg.solver_api.base_url == "http://127.0.0.1:5000/api/prolog"
    assert cfg.solver_api.param_robisep_id == "robisepId"


def test_from_yaml_overrides_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "solver_api:\n"
        "  host: http://prolog.internal:8080\n"
        "  timeout_sec: 2.5\n",
        encoding="utf-8",
    )
    cfg = Config.from_yaml(path)

    assert cfg.solver_api.base_url == "http://prolog.internal:8080/api/prolog"
    assert cfg.solver_api.timeout_sec == 2.5
    assert cfg.solver_api.url_paths == "/paths"
    assert cfg.grid.prolog_increment == 1


def test_from_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.from_yaml(path) == Config()
