"""Unit tests for the notion-cli command line (cli/main.py).

Tests the Typer application using CliRunner.  Commands run against a real
NotionClient whose HTTP traffic goes to ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import httpx
import pytest
from conftest import PAGE_ID, PAGE_UUID, PARENT_ID, json_response, list_response
from typer.testing import CliRunner

from notioncli import __version__
from notioncli.cli.main import _configure_logging, _mask, app
from notioncli.config import CliConfig, FileConfig, load_file_config, save_file_config
from notioncli.errors import MissingCredentialError

runner = CliRunner()


@pytest.fixture
def api(make_client):
    """Route every command to a mocked client; returns a setter for responses."""
    state = {}

    def setup(*responses):
        client, handler = make_client(*responses)
        patcher = patch("notioncli.cli.main._client", return_value=client)
        patcher.start()
        state["patcher"] = patcher
        return handler

    yield setup
    if "patcher" in state:
        state["patcher"].stop()


def title_prop(text: str) -> dict:
    return {"type": "title", "title": [{"plain_text": text}]}


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

class TestConfigureLogging:
    def test_verbose_sets_debug(self):
        with patch("notioncli.cli.main.set_log_level") as mock_set:
            _configure_logging(True)
        mock_set.assert_called_once_with(logging.DEBUG)

    def test_default_is_warning(self):
        with patch("notioncli.cli.main.set_log_level") as mock_set:
            _configure_logging(False)
        mock_set.assert_called_once_with(logging.WARNING)


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_options_reach_resolve_config(self):
        with (
            patch("notioncli.cli.main.resolve_config", return_value=CliConfig(api_key="k")) as mock_resolve,
            patch("notioncli.cli.main.NotionClient") as mock_client_cls,
        ):
            client = mock_client_cls.return_value
            client.__enter__.return_value = client
            client.search.return_value = []
            result = runner.invoke(
                app,
                ["--timeout", "5", "--api-key", "secret_cli", "--debug-payload", "search", "x"],
            )
        assert result.exit_code == 0, result.output
        mock_resolve.assert_called_once_with(
            cli_api_key="secret_cli", cli_timeout=5, debug_dump_payload=True
        )

    def test_timeout_must_be_positive(self):
        result = runner.invoke(app, ["--timeout", "0", "search", "x"])
        assert result.exit_code == 2

    def test_missing_credential_exits_1(self):
        with patch(
            "notioncli.cli.main.resolve_config",
            side_effect=MissingCredentialError("/cfg/config.toml"),
        ):
            result = runner.invoke(app, ["search", "x"])
        assert result.exit_code == 1
        assert "✗ Notion API key not found." in result.output
        assert "notion-cli init" in result.output


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

class TestSearch:
    def test_lists_results(self, api):
        handler = api(list_response([
            {"object": "page", "id": "id-1", "properties": {"title": title_prop("Roadmap")}},
            {"object": "database", "id": "id-2", "title": [{"plain_text": "Tasks"}]},
        ]))
        result = runner.invoke(app, ["search", "road", "--limit", "5"])
        assert result.exit_code == 0, result.output
        assert 'Searching: "road"' in result.output
        assert "✓ 2 results found" in result.output
        assert "[page] Roadmap" in result.output
        assert "[database] Tasks" in result.output
        assert "ID: id-1" in result.output
        assert handler.body(0) == {"query": "road", "page_size": 5}

    def test_limit_zero(self, api):
        handler = api()
        result = runner.invoke(app, ["search", "road", "-l", "0"])
        assert result.exit_code == 0
        assert "✓ 0 results found" in result.output
        assert handler.requests == []

    def test_html_body_reported_as_error(self, api):
        api(httpx.Response(200, content=b"<html>gateway</html>"))
        result = runner.invoke(app, ["search", "x"])
        assert result.exit_code == 1
        assert "✗ Notion API returned 200 with a non-JSON body on POST /search" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_list_body_reported_as_error(self, api):
        api(json_response(200, [1, 2]))
        result = runner.invoke(app, ["search", "x"])
        assert result.exit_code == 1
        assert "✗ Notion API returned 200 with a JSON list on POST /search" in result.output


class TestRead:
    def test_prints_title_and_blocks(self, api):
        api(
            json_response(200, {"id": PAGE_UUID, "properties": {"title": title_prop("Notes")}}),
            list_response([
                {"type": "heading_1", "heading_1": {"rich_text": [{"plain_text": "Intro"}]}},
                {"type": "paragraph", "paragraph": {"rich_text": [{"plain_text": "Body [x]"}]}},
                {"type": "child_database", "child_database": {}},
                {"type": "divider", "divider": {}},
            ]),
        )
        result = runner.invoke(app, ["read", PAGE_ID])
        assert result.exit_code == 0, result.output
        assert "Title: Notes" in result.output
        assert "# Intro" in result.output
        assert "Body [x]" in result.output
        assert "---" in result.output

    def test_invalid_id(self, api):
        handler = api()
        result = runner.invoke(app, ["read", "invalid"])
        assert result.exit_code == 1
        assert "✗ Invalid page ID 'invalid'" in result.output
        assert handler.requests == []

    def test_api_error(self, api):
        api(json_response(404, {"message": "Could not find page"}))
        result = runner.invoke(app, ["read", PAGE_ID])
        assert result.exit_code == 1
        assert "Could not find page" in result.output


class TestGetBlockIds:
    def test_lists_ids(self, api):
        api(list_response([
            {"id": "b-1", "type": "paragraph", "paragraph": {}},
            {"id": "b-2", "type": "image", "image": {}},
        ]))
        result = runner.invoke(app, ["get-block-ids", PAGE_ID])
        assert result.exit_code == 0
        assert "✓ 2 blocks found" in result.output
        assert "b-1  paragraph" in result.output
        assert "b-2  image" in result.output


class TestQuery:
    def test_rows_and_first_properties(self, api):
        handler = api(list_response([{
            "id": "row-1",
            "properties": {
                "Name": title_prop("Task A"),
                "Status": {"select": {"name": "Done"}},
                "Points": {"number": 3.0},
                "Link": {"url": "https://hidden"},
            },
        }]))
        result = runner.invoke(
            app,
            ["query", PAGE_ID, "-f", "Status:select=Done", "-s", "Points", "--direction", "asc"],
        )
        assert result.exit_code == 0, result.output
        assert "Filter: Status:select=Done" in result.output
        assert "Sort: Points (asc)" in result.output
        assert "• Task A" in result.output
        assert "Status: Done" in result.output
        assert "Points: 3" in result.output
        assert "https://hidden" not in result.output
        body = handler.body(0)
        assert body["filter"] == {"property": "Status", "select": {"equals": "Done"}}
        assert body["sorts"] == [{"property": "Points", "direction": "ascending"}]

    def test_bad_filter(self, api):
        api()
        result = runner.invoke(app, ["query", PAGE_ID, "-f", "Status"])
        assert result.exit_code == 1
        assert "Invalid filter" in result.output

    def test_other_direction_sorts_descending(self, api):
        handler = api(list_response([]))
        result = runner.invoke(app, ["query", PAGE_ID, "-s", "Points", "--direction", "up"])
        assert result.exit_code == 0, result.output
        assert handler.body(0)["sorts"] == [{"property": "Points", "direction": "descending"}]


# ---------------------------------------------------------------------------
# Creating and appending
# ---------------------------------------------------------------------------

class TestCreate:
    def test_create(self, api):
        handler = api(json_response(200, {"id": "new-id", "url": "https://notion.so/new"}))
        result = runner.invoke(app, ["create", "-p", PARENT_ID, "-t", "Hello", "-c", "World"])
        assert result.exit_code == 0, result.output
        assert "✓ Page created!" in result.output
        assert "ID: new-id" in result.output
        assert "URL: https://notion.so/new" in result.output
        assert handler.body(0)["children"][0]["type"] == "paragraph"

    def test_parent_required(self):
        result = runner.invoke(app, ["create", "-t", "Hello"])
        assert result.exit_code == 2


class TestAppend:
    @pytest.mark.parametrize(
        ("args", "block_type", "message"),
        [
            (["append", PAGE_ID, "text"], "paragraph", "Content appended!"),
            (["append-code", PAGE_ID, "x=1", "-l", "python"], "code", "Code block (python) appended!"),
            (["append-bookmark", PAGE_ID, "https://x", "-c", "cap"], "bookmark", "Bookmark appended!"),
            (["append-heading", PAGE_ID, "Title", "-l", "3"], "heading_3", "Heading (H3) appended!"),
            (["append-divider", PAGE_ID], "divider", "Divider appended!"),
            (["append-list", PAGE_ID, "a, b"], "bulleted_list_item", "List with 2 items appended!"),
            (
                ["append-link", PAGE_ID, "--link-text", "docs", "--url", "https://d", "--prefix", "See "],
                "paragraph",
                "Link appended!",
            ),
        ],
    )
    def test_append_commands(self, api, args, block_type, message):
        handler = api(json_response(200, {"results": []}))
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output
        assert f"✓ {message}" in result.output
        assert handler.calls == [("PATCH", f"/v1/blocks/{PAGE_UUID}/children")]
        assert handler.body(0)["children"][0]["type"] == block_type

    def test_code_default_language(self, api):
        handler = api(json_response(200))
        runner.invoke(app, ["append-code", PAGE_ID, "x"])
        assert handler.body(0)["children"][0]["code"]["language"] == "plain text"

    def test_heading_level_out_of_range(self):
        result = runner.invoke(app, ["append-heading", PAGE_ID, "Title", "-l", "4"])
        assert result.exit_code == 2

    def test_empty_list(self, api):
        handler = api()
        result = runner.invoke(app, ["append-list", PAGE_ID, " , "])
        assert result.exit_code == 1
        assert "At least one list item is required" in result.output
        assert handler.requests == []

    def test_rate_limit_notice_and_exhaustion(self, make_client):
        client, handler = make_client(*(json_response(429) for _ in range(4)), retry_notice=None)
        with patch("notioncli.cli.main._client", return_value=client):
            result = runner.invoke(app, ["append", PAGE_ID, "text"])
        assert result.exit_code == 1
        assert "Waiting 1 seconds before retry (3/3)..." in result.output
        assert "Rate limit exceeded after 3 retries" in result.output
        assert len(handler.requests) == 4


# ---------------------------------------------------------------------------
# Updating, deleting, moving
# ---------------------------------------------------------------------------

class TestUpdate:
    def test_update(self, api):
        api(json_response(200, {
            "properties": {"title": title_prop("Renamed")},
            "icon": {"type": "emoji", "emoji": "🚀"},
        }))
        result = runner.invoke(app, ["update", PAGE_ID, "-t", "Renamed", "-i", "🚀"])
        assert result.exit_code == 0, result.output
        assert "✓ Page updated!" in result.output
        assert "Title: Renamed" in result.output
        assert "Icon: 🚀" in result.output

    def test_update_requires_a_field(self, api):
        handler = api()
        result = runner.invoke(app, ["update", PAGE_ID])
        assert result.exit_code == 1
        assert "At least one of --title or --icon must be specified" in result.output
        assert handler.requests == []


class TestDelete:
    def test_archived(self, api):
        api(json_response(200, {"archived": True}))
        result = runner.invoke(app, ["delete", PAGE_ID])
        assert result.exit_code == 0
        assert "✓ Page archived (moved to trash)!" in result.output

    def test_status_unclear(self, api):
        api(json_response(200, {"archived": False}))
        result = runner.invoke(app, ["delete", PAGE_ID])
        assert result.exit_code == 0
        assert "⚠ Page status unclear" in result.output

    def test_delete_block(self, api):
        handler = api(json_response(200, {"archived": True}))
        result = runner.invoke(app, ["delete-block", PAGE_ID])
        assert result.exit_code == 0
        assert "✓ Block deleted!" in result.output
        assert handler.calls == [("DELETE", f"/v1/blocks/{PAGE_UUID}")]


class TestMove:
    def test_move_with_delete(self, api):
        handler = api(
            json_response(200, {"id": PAGE_UUID, "properties": {"title": title_prop("Doc")}}),
            list_response([
                {"type": "paragraph", "paragraph": {"rich_text": []}},
                {"type": "child_page", "child_page": {"title": "Sub"}},
            ]),
            json_response(200, {"id": "new-id", "url": "https://notion.so/new"}),
            json_response(200, {"archived": True}),
        )
        result = runner.invoke(app, ["move", PAGE_ID, "-p", PARENT_ID, "--delete"])
        assert result.exit_code == 0, result.output
        assert "✓ Page copied with 1 blocks!" in result.output
        assert "New ID: new-id" in result.output
        assert "child_page" in result.output
        assert "✓ Original page archived!" in result.output
        assert len(handler.requests) == 4


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def cfg_file(tmp_path):
    path = tmp_path / "notion-cli" / "config.toml"
    with patch("notioncli.cli.main.config_path", return_value=path):
        yield path


class TestConfigCommands:
    def test_init_with_key(self, cfg_file):
        result = runner.invoke(app, ["init", "--key", " secret_new "])
        assert result.exit_code == 0, result.output
        assert load_file_config(cfg_file).api_key == "secret_new"

    def test_init_prompts(self, cfg_file):
        result = runner.invoke(app, ["init"], input="secret_prompted\n")
        assert result.exit_code == 0, result.output
        assert load_file_config(cfg_file).api_key == "secret_prompted"

    def test_init_keeps_timeout(self, cfg_file):
        save_file_config(FileConfig(timeout=60), cfg_file)
        runner.invoke(app, ["init", "--key", "k"])
        assert load_file_config(cfg_file) == FileConfig(api_key="k", timeout=60)

    def test_set_timeout(self, cfg_file):
        result = runner.invoke(app, ["config", "set-timeout", "45"])
        assert result.exit_code == 0, result.output
        assert load_file_config(cfg_file).timeout == 45

    def test_set_timeout_rejects_zero(self, cfg_file):
        result = runner.invoke(app, ["config", "set-timeout", "0"])
        assert result.exit_code == 2

    def test_set_key(self, cfg_file):
        result = runner.invoke(app, ["config", "set-key", "secret_abc"])
        assert result.exit_code == 0
        assert load_file_config(cfg_file).api_key == "secret_abc"

    def test_show_masks_key(self, cfg_file):
        save_file_config(FileConfig(api_key="secret_abcdefgh1234"), cfg_file)
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "secret_abcdefgh1234" not in result.output
        assert "api_key: ...1234" in result.output
        assert "timeout: (not set)" in result.output

    def test_path(self, cfg_file):
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.output.strip() == str(cfg_file)


def test_mask():
    assert _mask("secret_abcdefgh1234") == "...1234"
    assert _mask("short") == "****"
