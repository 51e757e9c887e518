"""Tests for the pkgdesc CLI, argument parsing and configuration."""

import functools
import json
import logging
import os
import textwrap

import pytest

from args import find_config_path, find_fileno, parse_args
from config import apply_cli_overrides, apply_config, load_config
from constants import Constants, ExitCodes
from manifest.context import ExecutionContext
from manifest.handoff import HandoffState
from pkgdesc import evaluate_manifest, main

EXAMPLE_MANIFEST = """
from manifest import Dependency, Package, Product, SystemPackageProvider, Target, add_error, add_product

package = Package(
    name="Example",
    providers=[SystemPackageProvider.brew("libexample")],
    targets=[Target("Core"), Target("CLI", ["Core"])],
    dependencies=[Dependency.package(url="https://example.com/dep", major_version=1)],
)
add_product(Product(name="Example", targets=["Core"]))
add_error("deprecated field used")
"""


@pytest.fixture(autouse=True)
def restore_constants():
    """Config and CLI overrides mutate Constants; put them back after each test."""
    saved = {k: getattr(Constants, k) for k in ("LOG_LEVEL", "LOG_FILE", "FILENO_FLAG", "DEFAULT_INDENT")}
    yield
    for k, v in saved.items():
        setattr(Constants, k, v)


def write_manifest(tmp_path, body=EXAMPLE_MANIFEST):
    path = tmp_path / "Package.py"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


class TestFindFileno:
    """Discovery of the -fileno argument."""

    def test_present(self):
        assert find_fileno(["buildtool", "-fileno", "5"]) == 5

    @pytest.mark.parametrize("argv", [[], ["-fileno"], ["-fileno", "x"], ["--fileno", "3"]])
    def test_absent_or_malformed(self, argv):
        assert find_fileno(argv) is None

    def test_custom_flag(self):
        assert find_fileno(["--out-fd", "9"], flag="--out-fd") == 9


class TestArgParsing:
    """Tests for 'pkgdesc dump' argument parsing."""

    def test_defaults(self):
        ns = parse_args(["dump"])
        assert ns.action == "dump"
        assert ns.manifest == Constants.MANIFEST_FILE
        assert ns.FILENO is None
        assert ns.OUTPUT is None

    def test_fileno(self):
        ns = parse_args(["dump", "My.py", "-fileno", "4"])
        assert ns.manifest == "My.py"
        assert ns.FILENO == 4

    def test_logging_and_output(self):
        ns = parse_args(["dump", "--loglevel", "DEBUG", "--logfile", "x.log", "-o", "out.json", "--indent", "2"])
        assert ns.LOG_LEVEL == "DEBUG"
        assert ns.LOG_FILE == "x.log"
        assert ns.OUTPUT == "out.json"
        assert ns.INDENT == 2

    def test_action_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestConfig:
    """YAML config loading and precedence."""

    def test_missing_path(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yml")) == {}

    def test_no_path(self, monkeypatch):
        monkeypatch.delenv(Constants.CONFIG_ENV, raising=False)
        assert load_config(None) == {}

    def test_section(self, tmp_path):
        cfg = tmp_path / "pkgdesc.yml"
        cfg.write_text("pkgdesc:\n  log_level: DEBUG\n  indent: 4\n", encoding="utf-8")
        assert load_config(str(cfg)) == {"log_level": "DEBUG", "indent": 4}

    def test_env_var(self, tmp_path, monkeypatch):
        cfg = tmp_path / "pkgdesc.yml"
        cfg.write_text("fileno_flag: --out-fd\n", encoding="utf-8")
        monkeypatch.setenv(Constants.CONFIG_ENV, str(cfg))
        assert load_config() == {"fileno_flag": "--out-fd"}

    def test_malformed_yaml_ignored(self, tmp_path):
        cfg = tmp_path / "bad.yml"
        cfg.write_text("pkgdesc: [unclosed\n", encoding="utf-8")
        assert load_config(str(cfg)) == {}

    def test_apply_and_cli_precedence(self):
        apply_config({"log_level": "WARNING", "indent": "2", "bogus": 1})
        assert Constants.LOG_LEVEL == "WARNING"
        assert Constants.DEFAULT_INDENT == 2

        ns = parse_args(["dump", "--loglevel", "ERROR"])
        apply_cli_overrides(ns)
        assert Constants.LOG_LEVEL == "ERROR"
        assert Constants.DEFAULT_INDENT == 2

    def test_fileno_flag_from_config(self):
        apply_config({"fileno_flag": "--out-fd"})
        assert find_fileno(["--out-fd", "7"]) == 7

    def test_config_path_found_before_full_parse(self):
        assert find_config_path(["dump", "P.py", "--out-fd", "6", "-c", "cfg.yml"]) == "cfg.yml"
        assert find_config_path(["dump", "P.py"]) is None


class TestEvaluateManifest:
    """Running manifest scripts in isolated contexts."""

    def test_collects_package_products_errors(self, tmp_path):
        ctx, pkg = evaluate_manifest(str(write_manifest(tmp_path)))
        assert pkg.name == "Example"
        assert [p.name for p in ctx.products] == ["Example"]
        assert ctx.errors.messages() == ["deprecated field used"]
        assert ctx.handoff.state == HandoffState.UNARMED

    def test_evaluations_do_not_share_state(self, tmp_path):
        first, _ = evaluate_manifest(str(write_manifest(tmp_path)))
        second, _ = evaluate_manifest(str(write_manifest(tmp_path)))
        assert first is not second
        assert len(second.errors) == 1

    def test_no_package(self, tmp_path):
        _, pkg = evaluate_manifest(str(write_manifest(tmp_path, "x = 1\n")))
        assert pkg is None


class TestMain:
    """End-to-end CLI runs."""

    def test_prints_document(self, tmp_path, capsys):
        path = write_manifest(tmp_path)
        with pytest.raises(SystemExit) as exc:
            main(["dump", str(path)])
        assert exc.value.code == ExitCodes.SUCCESS.value
        doc = json.loads(capsys.readouterr().out)
        assert doc["package"]["name"] == "Example"
        assert doc["package"]["providers"] == [{"name": "Brew", "value": "libexample"}]
        assert doc["package"]["targets"][1] == {"name": "CLI", "dependencies": ["Core"]}
        assert doc["products"] == [{"name": "Example", "type": "library", "targets": ["Core"]}]
        assert doc["errors"] == ["deprecated field used"]

    def test_writes_output_file(self, tmp_path):
        path = write_manifest(tmp_path)
        out = tmp_path / "manifest.json"
        with pytest.raises(SystemExit) as exc:
            main(["dump", str(path), "-o", str(out), "--indent", "2"])
        assert exc.value.code == ExitCodes.SUCCESS.value
        text = out.read_text(encoding="utf-8")
        assert "\n  " in text
        assert json.loads(text)["package"]["name"] == "Example"

    def test_fileno_arms_handoff_instead_of_printing(self, tmp_path, capsys, monkeypatch):
        registered = []
        monkeypatch.setattr("pkgdesc.ExecutionContext", functools.partial(ExecutionContext, register=registered.append))
        r, w = os.pipe()
        try:
            with pytest.raises(SystemExit) as exc:
                main(["dump", str(write_manifest(tmp_path)), "-fileno", str(w)])
            assert exc.value.code == ExitCodes.SUCCESS.value
            assert capsys.readouterr().out == ""
            assert len(registered) == 1
            registered[0]()
            doc = json.loads(os.read(r, 65536).decode("utf-8"))
            assert doc["package"]["name"] == "Example"
        finally:
            os.close(r)

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["dump", str(tmp_path / "missing.py")])
        assert exc.value.code == ExitCodes.FILE_ERROR.value

    def test_manifest_raises(self, tmp_path, caplog):
        path = write_manifest(tmp_path, "raise RuntimeError('boom')\n")
        with caplog.at_level(logging.ERROR):
            with pytest.raises(SystemExit) as exc:
                main(["dump", str(path)])
        assert exc.value.code == ExitCodes.MANIFEST_ERROR.value
        assert "boom" in caplog.text

    def test_manifest_without_package(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["dump", str(write_manifest(tmp_path, "x = 1\n"))])
        assert exc.value.code == ExitCodes.NO_PACKAGE.value

    def test_manifest_raising_after_package_delivers_nothing(self, tmp_path, monkeypatch):
        registered = []
        monkeypatch.setattr("pkgdesc.ExecutionContext", functools.partial(ExecutionContext, register=registered.append))
        path = write_manifest(tmp_path, """
            from manifest import Package
            package = Package(name="Crashing")
            raise RuntimeError("failed after declaring the package")
        """)
        r, w = os.pipe()
        try:
            with pytest.raises(SystemExit) as exc:
                main(["dump", str(path), "-fileno", str(w)])
            assert exc.value.code == ExitCodes.MANIFEST_ERROR.value
            assert len(registered) == 1
            registered[0]()
            os.close(w)
            assert os.read(r, 65536) == b""
        finally:
            os.close(r)

    def test_fileno_flag_from_config_file(self, tmp_path, monkeypatch):
        registered = []
        monkeypatch.setattr("pkgdesc.ExecutionContext", functools.partial(ExecutionContext, register=registered.append))
        cfg = tmp_path / "pkgdesc.yml"
        cfg.write_text("pkgdesc:\n  fileno_flag: --out-fd\n", encoding="utf-8")
        r, w = os.pipe()
        try:
            with pytest.raises(SystemExit) as exc:
                main(["dump", str(write_manifest(tmp_path)), "-c", str(cfg), "--out-fd", str(w)])
            assert exc.value.code == ExitCodes.SUCCESS.value
            assert Constants.FILENO_FLAG == "--out-fd"
            assert len(registered) == 1
            registered[0]()
            doc = json.loads(os.read(r, 65536).decode("utf-8"))
            assert doc["package"]["name"] == "Example"
        finally:
            os.close(r)
