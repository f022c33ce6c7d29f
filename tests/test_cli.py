"""
Tests for the command line interface
"""
import json

import pytest
from click.testing import CliRunner

from ipdash import __version__, engine
from ipdash.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def offline(monkeypatch, upstream):
    """Route every client the CLI builds through a mocked upstream."""
    real_build_client = engine.build_client

    def install(**upstream_kwargs):
        transport = upstream(**upstream_kwargs)

        def build_client(timeout=engine.DEFAULT_TIMEOUT, http2=True, **_):
            return real_build_client(timeout, http2, transport)

        monkeypatch.setattr(engine, "build_client", build_client)

    return install


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestPing:
    def test_json_output(self, runner, offline):
        offline(unreachable={"opendns"})
        result = runner.invoke(main, ["ping", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [r["id"] for r in data] == ["google", "cloudflare", "opendns", "quad9"]
        assert data[2] == {
            "id": "opendns",
            "name": "OpenDNS",
            "host": "208.67.222.222",
            "ok": False,
            "error": "Failed to reach DNS endpoint",
        }

    def test_selected_targets_as_csv(self, runner, offline):
        offline()
        result = runner.invoke(main, ["ping", "-p", "Quad9", "-p", "google", "--csv"])

        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert lines[0].startswith("id,name,host,ok")
        assert [line.split(",")[0] for line in lines[1:]] == ["quad9", "google"]

    def test_table_output_and_file_export(self, runner, offline, tmp_path):
        offline(doh_status={"cloudflare": 503})
        out = tmp_path / "pings.json"
        result = runner.invoke(main, ["ping", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "Resolver Latency" in result.output
        assert "Google DNS" in result.output
        saved = json.loads(out.read_text())
        assert saved[1]["httpStatus"] == 503

    def test_target_names_are_trimmed(self, runner, offline):
        offline()
        result = runner.invoke(main, ["ping", "-p", " cloudflare ", "--json"])

        assert result.exit_code == 0, result.output
        assert [r["id"] for r in json.loads(result.stdout)] == ["cloudflare"]

    def test_custom_url(self, runner, offline):
        offline()
        result = runner.invoke(
            main, ["ping", "--json", "--url", "https://dns.google/resolve?name=example.org&type=AAAA"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data[0]["id"] == "custom"
        assert data[0]["host"] == "dns.google"

    def test_unknown_target(self, runner, offline):
        offline()
        result = runner.invoke(main, ["ping", "-p", "nextdns"])

        assert result.exit_code == 1
        assert "Unknown ping target" in result.output

    def test_all_unreachable_exits_non_zero(self, runner, offline):
        offline(unreachable={"google", "cloudflare", "opendns", "quad9"})
        result = runner.invoke(main, ["ping", "--json"])
        assert result.exit_code == 1


class TestIp:
    def test_renders_record(self, runner, offline):
        seen = []
        offline(seen=seen)
        result = runner.invoke(main, ["ip", "203.0.113.7"])

        assert result.exit_code == 0, result.output
        assert "203.0.113.7" in result.output
        assert "Portugal" in result.output
        assert "AS64500" in result.output
        assert seen[0].url.path == "/203.0.113.7"

    def test_json_output(self, runner, offline, ip_document):
        offline()
        result = runner.invoke(main, ["ip", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ip_document

    def test_key_from_environment(self, runner, offline):
        seen = []
        offline(seen=seen)
        result = runner.invoke(main, ["ip", "--json"], env={"IPDASH_IPREGISTRY_KEY": "secret-key"})

        assert result.exit_code == 0, result.output
        assert seen[0].url.params["key"] == "secret-key"

    def test_upstream_failure(self, runner, offline):
        offline(ip_status=429)
        result = runner.invoke(main, ["ip"])

        assert result.exit_code == 1
        assert "Failed to query upstream IP service" in result.output


def test_serve_builds_app_from_options_and_env(runner, monkeypatch):
    import uvicorn

    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", fake_run)
    result = runner.invoke(
        main,
        ["serve", "--host", "0.0.0.0", "--timeout", "3.5", "--no-http2"],
        env={"IPDASH_PORT": "9100", "IPDASH_LOG_LEVEL": "debug"},
    )

    assert result.exit_code == 0, result.output
    assert calls["host"] == "0.0.0.0"
    assert calls["port"] == 9100
    assert calls["log_level"] == "debug"
    config = calls["app"].state.config
    assert config.timeout == 3.5
    assert config.http2 is False
    assert config.port == 9100
