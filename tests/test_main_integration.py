from pubip import main as main_module
from pubip.errors import NotEnoughResultsError


class FakeResolver:
    outcome: object = "203.0.113.10"

    def __init__(self, config, logger) -> None:
        self.config = config

    def resolve(self) -> str:
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return str(self.outcome)


def test_main_prints_resolved_ip(monkeypatch, capsys) -> None:
    monkeypatch.setattr(main_module, "Resolver", FakeResolver)
    assert main_module.main(["--endpoint", "a", "--endpoint", "b", "--endpoint", "c"]) == 0
    assert capsys.readouterr().out.strip() == "203.0.113.10"


def test_main_returns_one_on_resolution_failure(monkeypatch, capsys) -> None:
    class Failing(FakeResolver):
        outcome = NotEnoughResultsError(1, 3, 3, [])

    monkeypatch.setattr(main_module, "Resolver", Failing)
    assert main_module.main(["--endpoint", "a", "--endpoint", "b", "--endpoint", "c"]) == 1
    assert capsys.readouterr().out == ""


def test_main_returns_two_on_config_error(capsys) -> None:
    assert main_module.main(["--max-tries", "0"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_main_returns_two_on_invalid_log_level(monkeypatch, capsys) -> None:
    monkeypatch.setenv("LOG_LEVEL", "bogus")
    monkeypatch.setattr(main_module, "Resolver", FakeResolver)
    assert main_module.main(["--endpoint", "a", "--endpoint", "b", "--endpoint", "c"]) == 2
    assert "Invalid log level: bogus" in capsys.readouterr().err
