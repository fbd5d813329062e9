"""End-to-end resolver behaviour: precedence, caching, lazy parsing, retries."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from lib_getconfig import ConfigResolver, FileLoadError, InvalidArgument, InvalidFormat
from lib_getconfig.adapters.file_loaders.structured import IniFileLoader
from lib_getconfig.domain.config import CandidateFile
from tests.support import ConfigSandbox


@pytest.fixture()
def count_loads(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Record every path handed to the ini loader."""

    calls: list[str] = []
    original = IniFileLoader.load

    def _recording(self, path: str):
        calls.append(path)
        return original(self, path)

    monkeypatch.setattr(IniFileLoader, "load", _recording)
    return calls


def test_unknown_key_is_none(sandbox: ConfigSandbox) -> None:
    primary = sandbox.write("get_config_test.ini", "test.string = example\n")
    config = ConfigResolver(primary)
    assert config.get("not.found") is None
    assert config.get("test.string") == "example"


def test_unknown_key_without_any_files_is_none() -> None:
    config = ConfigResolver()
    assert config.files == ()
    assert config.get("nothing.configured.anywhere") is None


def test_environment_beats_files(sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    primary = sandbox.write("app.ini", "dealnews.test.env.var = from-file\n")
    monkeypatch.setenv("DEALNEWS_TEST_ENV_VAR", "foo")
    assert ConfigResolver(primary).get("dealnews.test.env.var") == "foo"


def test_environment_set_after_construction_wins_after_drain(
    sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch
) -> None:
    primary = sandbox.write("app.ini", "target.key = file\nunrelated = x\n")
    config = ConfigResolver(primary)
    monkeypatch.setenv("TARGET_KEY", "env")
    assert config.get("unrelated") == "x"
    assert config.pending == 0
    assert config.get("target.key") == "env"


def test_directory_files_override_primary_in_order(sandbox: ConfigSandbox) -> None:
    primary = sandbox.write("A.ini", "k = 1\nonly.primary = p\n")
    sandbox.write("config.d/01-x.ini", "k = 2\n")
    sandbox.write("config.d/02-y.ini", "k = 2b\n")
    sandbox.write("config.d/03-z.json", '{"other": "z"}')
    config = ConfigResolver(primary)
    assert config.get("k") == "2b"
    assert config.get("only.primary") == "p"
    assert config.origin("k") == {"layer": "file", "path": str(sandbox.ini_dir / "02-y.ini"), "key": "k"}


def test_primary_inside_directory_is_merged_again_at_its_sorted_position(
    sandbox: ConfigSandbox, count_loads: list[str]
) -> None:
    primary = sandbox.write("config.d/30-main.ini", "k = main\n")
    sandbox.write("config.d/20-extra.ini", "k = extra\nonly.extra = e\n")
    config = ConfigResolver(primary, sandbox.ini_dir)
    assert [Path(candidate.path).name for candidate in config.files] == ["30-main.ini", "20-extra.ini", "30-main.ini"]
    assert config.get("k") == "main"
    assert config.get("only.extra") == "e"
    assert config.origin("k")["path"] == str(primary)
    assert count_loads == [str(primary), str(sandbox.ini_dir / "20-extra.ini")]


def test_yaml_boolean_keys_match_their_rendered_spelling(sandbox: ConfigSandbox) -> None:
    sandbox.write("config.d/01.yaml", "feature:\n  on: 1\n  off: 0\n")
    config = ConfigResolver()
    assert config.get("feature.true") == "1"
    assert config.get("FEATURE.FALSE") == "0"


def test_extensions_interleave_by_filename(sandbox: ConfigSandbox) -> None:
    sandbox.write("config.d/10-base.yaml", "service:\n  timeout: 10\n")
    sandbox.write("config.d/20-override.ini", "service.timeout = 20\n")
    sandbox.write("config.d/30-final.json", '{"service": {"timeout": 30}}')
    sandbox.write("config.d/25-ignored.toml", "service.timeout = 25\n")
    config = ConfigResolver()
    assert [Path(candidate.path).name for candidate in config.files] == [
        "10-base.yaml",
        "20-override.ini",
        "30-final.json",
    ]
    assert config.get("service.timeout") == "30"


@pytest.mark.parametrize(
    "env_name",
    ["A_B", "a_b", "A.B", "a.b"],
)
def test_key_spellings_match_environment(env_name: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(env_name, "from-env")
    assert ConfigResolver().get("a.b") == "from-env"


def test_variant_order_decides_between_environment_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("a.b", "raw")
    monkeypatch.setenv("A_B", "underscored")
    assert ConfigResolver().get("a.b") == "underscored"


def test_file_keys_match_case_variants(sandbox: ConfigSandbox) -> None:
    sandbox.write("config.d/01.ini", "SERVICE.NAME = upper\n")
    assert ConfigResolver().get("service.name") == "upper"


def test_all_spellings_share_cached_outcome(sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    sandbox.write("config.d/01.ini", "a.b = file\n")
    config = ConfigResolver()
    assert config.get("a.b") == "file"
    monkeypatch.setenv("A_B", "late")
    for spelling in ("A_B", "a_b", "a.b", "A.B"):
        assert config.get(spelling) == "file"


def test_absent_outcome_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    config = ConfigResolver()
    assert config.get("late.key") is None
    monkeypatch.setenv("LATE_KEY", "value")
    assert config.get("late.key") is None
    assert ConfigResolver().get("late.key") == "value"


def test_files_parsed_once(sandbox: ConfigSandbox, count_loads: list[str]) -> None:
    primary = sandbox.write("app.ini", "a = 1\n")
    sandbox.write("config.d/01.ini", "b = 2\n")
    config = ConfigResolver(primary)
    assert count_loads == []
    assert config.get("a") == "1"
    assert config.get("b") == "2"
    assert config.get("missing") is None
    assert config.get("A") == "1"
    assert count_loads == [str(primary), str(sandbox.ini_dir / "01.ini")]


def test_environment_hit_does_not_parse_files(
    sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch, count_loads: list[str]
) -> None:
    primary = sandbox.write("app.ini", "a = 1\n")
    monkeypatch.setenv("FROM_ENV", "yes")
    config = ConfigResolver(primary)
    assert config.get("from.env") == "yes"
    assert count_loads == []
    assert config.pending == 1


def test_empty_string_and_zero_are_values(sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    sandbox.write("config.d/01.ini", "empty.setting =\nzero.setting = 0\n")
    sandbox.write("config.d/02.yaml", "yaml:\n  zero: 0\n  empty: ''\n  disabled: false\n  unset: null\n")
    monkeypatch.setenv("EMPTY_ENV", "")
    config = ConfigResolver()
    assert config.get("empty.setting") == ""
    assert config.get("zero.setting") == "0"
    assert config.get("yaml.zero") == "0"
    assert config.get("yaml.empty") == ""
    assert config.get("yaml.disabled") == "false"
    assert config.get("yaml.unset") is None
    assert config.get("empty.env") == ""


def test_missing_explicit_file_fails_construction(tmp_path: Path) -> None:
    with pytest.raises(InvalidArgument):
        ConfigResolver(tmp_path / "bad_filename.ini")


def test_missing_override_file_fails_construction(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DN_INI_FILE", str(tmp_path / "bad_filename.ini"))
    with pytest.raises(InvalidArgument):
        ConfigResolver()


def test_empty_override_file_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DN_INI_FILE", "")
    monkeypatch.setenv("DEALNEWS_TEST_ENV_VAR", "foo")
    assert ConfigResolver().get("dealnews.test.env.var") == "foo"


def test_override_file_is_loaded(sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    override = sandbox.write("elsewhere/get_config_env.ini", "test.string = example2\n")
    monkeypatch.setenv("DN_INI_FILE", str(override))
    assert ConfigResolver().get("test.string") == "example2"


def test_malformed_file_fails_lazily_after_three_attempts(
    sandbox: ConfigSandbox, count_loads: list[str]
) -> None:
    primary = sandbox.write("get_config_empty.ini", "")
    config = ConfigResolver(primary)
    with pytest.raises(FileLoadError, match="3 attempts") as excinfo:
        config.get("test.string")
    assert str(primary) in str(excinfo.value)
    assert isinstance(excinfo.value, InvalidFormat)
    assert count_loads == [str(primary)] * 3


def test_syntax_error_is_retried_then_reported(sandbox: ConfigSandbox) -> None:
    sandbox.write("config.d/01.json", "{broken")
    config = ConfigResolver()
    with pytest.raises(FileLoadError) as excinfo:
        config.get("any.key")
    assert isinstance(excinfo.value.__cause__, InvalidFormat)


def test_failure_does_not_skip_to_later_files(sandbox: ConfigSandbox) -> None:
    sandbox.write("config.d/01.ini", "not an assignment\n")
    sandbox.write("config.d/02.ini", "k = v\n")
    config = ConfigResolver()
    with pytest.raises(FileLoadError):
        config.get("k")
    assert config.pending == 2


def test_transient_read_failure_is_retried(sandbox: ConfigSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    primary = sandbox.write("app.ini", "k = v\n")
    original = IniFileLoader.load
    attempts: list[int] = []

    def _flaky(self, path: str):
        attempts.append(1)
        if len(attempts) < 3:
            return {}
        return original(self, path)

    monkeypatch.setattr(IniFileLoader, "load", _flaky)
    config = ConfigResolver(primary)
    assert config.get("k") == "v"
    assert len(attempts) == 3


def test_unsupported_extension_fails_without_retry(sandbox: ConfigSandbox) -> None:
    primary = sandbox.write("settings.toml", "k = 'v'\n")
    config = ConfigResolver(primary)
    assert config.files == (CandidateFile(str(primary), "toml"),)
    with pytest.raises(InvalidFormat, match="settings.toml") as excinfo:
        config.get("k")
    assert not isinstance(excinfo.value, FileLoadError)


def test_find_file_uses_configured_directories(sandbox: ConfigSandbox) -> None:
    sandbox.write("credentials.json", "{}")
    sandbox.write("config.d/credentials.json", "{}")
    sandbox.write("config.d/only-dir.pem", "x")
    config = ConfigResolver()
    assert config.find_file("credentials.json") == str(sandbox.etc_dir / "credentials.json")
    assert config.find_file("only-dir.pem") == str(sandbox.ini_dir / "only-dir.pem")
    assert config.find_file("nope") is None


def test_origin_reports_environment_and_absence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("service_token", "secret")
    config = ConfigResolver()
    assert config.origin("service.token") == {"layer": "env", "path": None, "key": "service_token"}
    assert config.origin("missing") is None


def test_explicit_environ_mapping(sandbox: ConfigSandbox) -> None:
    environ = {"DN_ETC_DIR": str(sandbox.etc_dir)}
    sandbox.write("config.ini", "k = file\n")
    config = ConfigResolver(environ=environ)
    environ["K"] = "env"
    assert config.get("k") == "env"


def test_concurrent_first_lookups_parse_each_file_once(
    sandbox: ConfigSandbox, count_loads: list[str]
) -> None:
    for index in range(5):
        sandbox.write(f"config.d/{index:02d}.ini", f"key{index} = {index}\n")
    config = ConfigResolver()
    results: dict[int, str | None] = {}
    barrier = threading.Barrier(5)

    def _lookup(index: int) -> None:
        barrier.wait()
        results[index] = config.get(f"key{index}")

    threads = [threading.Thread(target=_lookup, args=(index,)) for index in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == {index: str(index) for index in range(5)}
    assert sorted(count_loads) == sorted(set(count_loads))
    assert len(count_loads) == 5
