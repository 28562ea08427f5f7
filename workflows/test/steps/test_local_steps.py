"""Tests for the echo, command, download and decompress steps."""

from __future__ import annotations

import io
import sys
import tarfile
from pathlib import Path

import pytest

from workflows.core.result import Err, Ok
from workflows.net.http import HttpError, MockHttpClient
from workflows.output.console import MockConsole
from workflows.steps.base import Payload
from workflows.steps.command import Command
from workflows.steps.decompress import Decompress
from workflows.steps.download import Download, filename_from_url
from workflows.steps.echo import Echo


class TestEchoStep:
    def test_prints_and_forwards(self) -> None:
        console = MockConsole()

        result = Echo(console).execute(Payload({"text": "hello"}))

        assert result == Ok(Payload({"text": "hello"}))
        assert console.messages == ["hello"]


class TestCommandStep:
    def test_runs_and_waits(self, tmp_path: Path) -> None:
        marker = tmp_path / "ran"
        args = f"-c \"import pathlib; pathlib.Path(r'{marker}').touch()\""

        result = Command().execute(Payload({"program": sys.executable, "args": args}))

        assert isinstance(result, Ok)
        assert result.value.parameter("exit_code") == "0"
        assert marker.exists()

    def test_nonzero_exit_fails(self) -> None:
        result = Command().execute(
            Payload({"program": sys.executable, "args": "-c 'raise SystemExit(2)'"})
        )

        assert isinstance(result, Err)
        assert "exit 2" in result.error.message

    def test_daemon_does_not_wait(self) -> None:
        result = Command().execute(
            Payload(
                {
                    "program": sys.executable,
                    "args": "-c 'import time; time.sleep(0.2)'",
                    "daemon": "true",
                }
            )
        )

        assert isinstance(result, Ok)
        assert result.value.parameter("exit_code") == ""
        assert result.value.parameter("pid").isdigit()

    def test_output_discarded_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        Command().execute(Payload({"program": sys.executable, "args": "-c 'print(42)'"}))

        assert "42" not in capfd.readouterr().out

    def test_inherit_io(self, capfd: pytest.CaptureFixture[str]) -> None:
        Command().execute(
            Payload({"program": sys.executable, "args": "-c 'print(42)'", "inherit_io": "true"})
        )

        assert "42" in capfd.readouterr().out

    def test_missing_program(self) -> None:
        assert isinstance(Command().execute(Payload()), Err)

    def test_unknown_program(self) -> None:
        result = Command().execute(Payload({"program": "definitely-not-a-real-program-xyz"}))

        assert isinstance(result, Err)

    def test_bad_args(self) -> None:
        result = Command().execute(Payload({"program": "echo", "args": "'unclosed"}))

        assert isinstance(result, Err)
        assert "invalid args" in result.error.message


class TestDownloadStep:
    URL = "https://example.com/files/tool.tar.gz"

    def test_filename_from_url(self) -> None:
        assert filename_from_url(self.URL) == "tool.tar.gz"
        assert filename_from_url("https://example.com/a%20b.txt?x=1") == "a b.txt"
        assert filename_from_url("https://example.com/") == "download"

    def test_explicit_path(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(self.URL, b"12345")
        dest = tmp_path / "out.tgz"

        result = Download(client).execute(Payload({"url": self.URL, "path": str(dest)}))

        assert result == Ok(Payload({"path": str(dest), "size": "5"}))
        assert dest.read_bytes() == b"12345"

    def test_directory_path(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(self.URL, b"x")

        result = Download(client).execute(Payload({"url": self.URL, "path": str(tmp_path)}))

        assert isinstance(result, Ok)
        assert result.value.parameter("path") == str(tmp_path / "tool.tar.gz")

    def test_default_path_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        client = MockHttpClient()
        client.set_download(self.URL, b"x")

        result = Download(client).execute(Payload({"url": self.URL}))

        assert isinstance(result, Ok)
        assert (tmp_path / "tool.tar.gz").exists()

    def test_http_error(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(self.URL, HttpError(self.URL, 503, "Unavailable"))

        result = Download(client).execute(
            Payload({"url": self.URL, "path": str(tmp_path / "f")})
        )

        assert isinstance(result, Err)
        assert result.error.kind == "network"

    def test_missing_url(self) -> None:
        assert isinstance(Download(MockHttpClient()).execute(Payload()), Err)


class TestDecompressStep:
    @staticmethod
    def _archive(path: Path) -> Path:
        with tarfile.open(path, "w:gz") as tar:
            for name in ("pkg/a.txt", "pkg/sub/b.txt"):
                info = tarfile.TarInfo(name=name)
                info.size = 1
                tar.addfile(info, io.BytesIO(b"x"))
        return path

    def test_default_target(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path / "pkg-1.0.tar.gz")

        result = Decompress().execute(Payload({"path": str(archive)}))

        assert result == Ok(Payload({"path": str(tmp_path / "pkg-1.0"), "files_count": "2"}))
        assert (tmp_path / "pkg-1.0" / "pkg" / "a.txt").exists()

    def test_target_and_strip(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path / "pkg.tar.gz")
        target = tmp_path / "out"

        result = Decompress().execute(
            Payload({"path": str(archive), "target": str(target), "strip_components": "1"})
        )

        assert isinstance(result, Ok)
        assert (target / "sub" / "b.txt").exists()

    def test_bad_strip(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path / "pkg.tar.gz")

        result = Decompress().execute(Payload({"path": str(archive), "strip_components": "x"}))

        assert isinstance(result, Err)
        assert "integer" in result.error.message

    def test_missing_archive(self, tmp_path: Path) -> None:
        result = Decompress().execute(Payload({"path": str(tmp_path / "none.zip")}))

        assert isinstance(result, Err)
        assert result.error.kind == "io"
