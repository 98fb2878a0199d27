"""Tests for action reporting."""

from pathlib import Path
from unittest.mock import MagicMock, PropertyMock

import pytest

from s3sync.sync.report import Reporter


def make_resource(path: str = "a.txt", gzipped: bool = False) -> MagicMock:
    resource = MagicMock()
    resource.path = path
    resource.gzipped = gzipped
    resource.original_path = Path("/build") / path
    resource.local_path = Path("/build") / (f"{path}.gz" if gzipped else path)
    resource.local_object_md5 = "body"
    resource.local_content_md5 = "content"
    return resource


class TestReporter:
    """Tests for Reporter."""

    def test_creating_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Creating prints the verb and path only."""
        Reporter().creating(make_resource())

        assert capsys.readouterr().out == "Creating a.txt\n"

    def test_gzipped_detail(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Gzipped uploads are flagged."""
        Reporter().creating(make_resource(gzipped=True))

        assert capsys.readouterr().out == "Creating a.txt (gzipped)\n"

    def test_dry_run_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Dry-run lines are prefixed."""
        Reporter(dry_run=True).deleting(make_resource())

        assert capsys.readouterr().out == "[dry run] Deleting a.txt\n"

    def test_verbose_details(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verbose mode prints paths and the content md5."""
        Reporter(verbose=True).creating(make_resource())

        out = capsys.readouterr().out
        assert "Original:" in out
        assert "Local Path:" in out
        assert "content md5: content" in out

    def test_update_skips_head_when_quiet(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Remote hashes are not looked up unless verbose."""
        resource = make_resource()
        remote_md5 = PropertyMock(return_value="remote")
        type(resource).remote_content_md5 = remote_md5

        Reporter().updating(resource)

        remote_md5.assert_not_called()
        assert capsys.readouterr().out == "Updating a.txt\n"

    def test_ignoring_uses_resource_reason(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Without an explicit reason, the resource's own reason is shown."""
        resource = make_resource()
        resource.ignore_reason = "redirect"

        Reporter().ignoring(resource)

        assert capsys.readouterr().out == "Ignoring a.txt (redirect)\n"

    def test_identical_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Identical resources are silent unless verbose."""
        Reporter().identical(make_resource())
        assert capsys.readouterr().out == ""

        Reporter(verbose=True).identical(make_resource())
        assert capsys.readouterr().out == "Identical a.txt\n"

    def test_err_stream(self, capsys: pytest.CaptureFixture[str]) -> None:
        """err=True writes to stderr."""
        Reporter(err=True).deleting(make_resource())

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Deleting a.txt\n"
