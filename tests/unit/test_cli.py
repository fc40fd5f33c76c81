from __future__ import annotations

import json

import pytest

from uk_covid19_client import cli
from uk_covid19_client.client import Cov19Client
from tests.shared.payloads import json_page, make_openapi_payload, make_record, no_content
from tests.shared.transport import Response, build_sync_transport


@pytest.fixture
def patch_client(monkeypatch):
    def _install(*scripts):
        transport, recorder = build_sync_transport(*scripts)

        def _build(args):
            query = cli.Cov19Query(
                filters=dict(args.filters),
                structure=dict(args.structure),
                latest_by=args.latest_by,
            )
            return Cov19Client(query, transport=transport)

        monkeypatch.setattr(cli, "_build_client", _build)
        return recorder

    return _install


def test_build_cli_parses_repeatable_pairs():
    args = cli.build_cli().parse_args(
        ["--filter", "areaType=nation", "--filter", "areaName=England", "--structure", "date=date", "data"]
    )
    assert args.filters == [("areaType", "nation"), ("areaName", "England")]
    assert args.structure == [("date", "date")]
    assert args.command == "data"


def test_build_cli_rejects_malformed_pair():
    with pytest.raises(SystemExit):
        cli.build_cli().parse_args(["--filter", "areaType", "data"])


def test_data_command_prints_records(patch_client, capsys):
    recorder = patch_client([json_page([make_record("2021-01-01", 5)]), no_content()])
    assert cli.main(["--filter", "areaType=nation", "data"]) == 0

    out, err = capsys.readouterr()
    assert json.loads(out.strip()) == {"MyDate": "2021-01-01", "newCases": 5}
    assert "length=1 total_pages=1" in err
    assert "filters=areaType=nation&" in recorder.clients[0].urls[0]


def test_options_command_prints_servers(patch_client, capsys):
    payload = make_openapi_payload("https://api.example.test/v1/data")
    patch_client([Response(200, json.dumps(payload).encode("utf-8"))])
    assert cli.main(["options"]) == 0
    assert "server: https://api.example.test/v1/data" in capsys.readouterr().out


def test_last_update_command_prints_unknown(patch_client, capsys):
    patch_client([Response(200, b"{}")])
    assert cli.main(["last-update"]) == 0
    assert capsys.readouterr().out.strip() == "unknown"


def test_errors_exit_with_status_one(patch_client, capsys):
    patch_client([Response(500)])
    assert cli.main(["data"]) == 1
    assert "error: API responded 500" in capsys.readouterr().err
