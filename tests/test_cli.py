"""
End-to-end tests for the dwm-msg command against a fake dwm server.
"""

import json
import os
import warnings

import pytest
from click.testing import CliRunner

from conftest import make_frame
from dwm_msg.__main__ import EXIT_CONNECTION, EXIT_FAILURE, cli, complete_args
from dwm_msg.models import MessageType


SUCCESS = b'{"result":"success"}'


@pytest.fixture
def runner():
    return CliRunner()


def event(n: int) -> bytes:
    return make_frame(MessageType.EVENT, b'{"tag_change_event":{"selected":%d}}' % n)


# ============================================================================
# Requests
# ============================================================================

def test_run_command(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.RUN_COMMAND, SUCCESS))])

    result = runner.invoke(cli, ["-s", socket_path, "view", "1", "-2", "3.5", "tag"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == SUCCESS + b"\n"
    assert server.requests == [
        (MessageType.RUN_COMMAND, b'{"command":"view","args":[1,-2,3.5,"tag"]}')
    ]


def test_run_command_ignore_reply(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.RUN_COMMAND, SUCCESS))])

    result = runner.invoke(cli, ["-s", socket_path, "-i", "-t", "command", "togglebar"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == b""


def test_type_name_is_case_insensitive(runner, socket_path, dwm_server):
    reply = b'[{"bit_mask":1,"name":"1"}]'
    server = dwm_server([("recv",), ("send", make_frame(MessageType.GET_TAGS, reply))])

    result = runner.invoke(cli, ["-s", socket_path, "-t", "GET_TAGS"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == reply + b"\n"
    assert server.requests == [(MessageType.GET_TAGS, b"\x00")]


def test_get_dwm_client(runner, socket_path, dwm_server):
    reply = b'{"name":"st"}'
    server = dwm_server([("recv",), ("send", make_frame(MessageType.GET_DWM_CLIENT, reply))])

    result = runner.invoke(cli, ["-s", socket_path, "-t", "get_dwm_client", "12345"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert json.loads(server.requests[0][1]) == {"client_window_id": 12345}


def test_get_dwm_client_oversized_id_is_clamped(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.GET_DWM_CLIENT, b"{}"))])

    result = runner.invoke(cli, ["-s", socket_path, "-t", "get_dwm_client", "9" * 5000])
    server.stop()

    assert result.exit_code == 0, result.output
    assert server.requests == [
        (MessageType.GET_DWM_CLIENT, b'{"client_window_id":9223372036854775807}')
    ]


def test_run_command_with_undecodable_argument(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.RUN_COMMAND, SUCCESS))])

    result = runner.invoke(cli, ["-s", socket_path, "spawn", os.fsdecode(b"caf\xe9")])
    server.stop()

    assert result.exit_code == 0, result.output
    assert server.requests == [
        (MessageType.RUN_COMMAND, b'{"command":"spawn","args":["caf\xe9"]}')
    ]


def test_run_emits_no_deprecation_warnings(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.GET_TAGS, b"[]"))])

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = runner.invoke(cli, ["-s", socket_path, "-t", "get_tags"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == b"[]\n"
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]


def test_socket_from_environment(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", make_frame(MessageType.GET_LAYOUTS, b"[]"))])

    result = runner.invoke(cli, ["-t", "get_layouts"], env={"DWM_MSG_SOCKET": socket_path})
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == b"[]\n"


# ============================================================================
# Subscriptions
# ============================================================================

def test_subscribe_prints_ack_and_first_event(runner, socket_path, dwm_server):
    server = dwm_server([
        ("recv",),
        ("send", make_frame(MessageType.SUBSCRIBE, SUCCESS)),
        ("send", event(1)),
    ])

    result = runner.invoke(cli, ["-s", socket_path, "-t", "subscribe", "tag_change_event"])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes.splitlines() == [SUCCESS, b'{"tag_change_event":{"selected":1}}']


def test_subscribe_multiple_events_ignoring_acks(runner, socket_path, dwm_server):
    ack = make_frame(MessageType.SUBSCRIBE, SUCCESS)
    server = dwm_server([
        ("recv",), ("send", ack),
        ("recv",), ("send", ack),
        ("send", event(4)),
    ])

    result = runner.invoke(cli, [
        "-s", socket_path, "-i", "-t", "subscribe", "tag_change_event", "layout_change_event",
    ])
    server.stop()

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == b'{"tag_change_event":{"selected":4}}\n'
    assert [json.loads(payload)["event"] for _, payload in server.requests] == [
        "tag_change_event", "layout_change_event",
    ]


def test_monitor_prints_events_until_connection_drops(runner, socket_path, dwm_server):
    server = dwm_server([
        ("recv",),
        ("send", make_frame(MessageType.SUBSCRIBE, SUCCESS)),
        ("send", event(1)),
        ("send", event(2)),
        ("send", event(3)),
        ("close",),
    ])

    result = runner.invoke(cli, ["-s", socket_path, "-m", "-t", "subscribe", "tag_change_event"])
    server.stop()

    assert result.exit_code == EXIT_FAILURE
    assert result.stdout_bytes.splitlines() == [
        SUCCESS,
        b'{"tag_change_event":{"selected":1}}',
        b'{"tag_change_event":{"selected":2}}',
        b'{"tag_change_event":{"selected":3}}',
    ]


def test_bad_magic_from_server(runner, socket_path, dwm_server):
    server = dwm_server([("recv",), ("send", b"I3-IPC " + b"\x00" * 5)])

    result = runner.invoke(cli, ["-s", socket_path, "-t", "get_monitors"])
    server.stop()

    assert result.exit_code == EXIT_FAILURE
    assert result.stdout_bytes == b""


# ============================================================================
# Failures before talking to dwm
# ============================================================================

def test_missing_socket(runner, socket_path):
    result = runner.invoke(cli, ["-s", socket_path, "-t", "get_tags"])

    assert result.exit_code == EXIT_CONNECTION


def test_socket_path_too_long(runner, socket_dir):
    result = runner.invoke(cli, ["-s", str(socket_dir / ("x" * 200)), "-t", "get_tags"])

    assert result.exit_code == EXIT_CONNECTION


@pytest.mark.parametrize("argv", [
    ["-m", "-t", "get_tags"],
    ["-t", "run_command"],
    ["-t", "get_dwm_client"],
    ["-t", "get_dwm_client", "0x1f"],
    ["-t", "get_dwm_client", "-5"],
    ["-t", "subscribe"],
    ["-t", "get_everything"],
    ["-s", "", "-t", "get_tags"],
])
def test_usage_errors(runner, socket_path, argv):
    result = runner.invoke(cli, argv)

    assert result.exit_code == 2


def test_help_lists_known_events(runner):
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "focused_state_change_event" in result.output


def test_event_completion_only_for_subscribe():
    ctx = cli.make_context("dwm-msg", ["-t", "subscribe"], resilient_parsing=True)
    assert complete_args(ctx, None, "tag") == ["tag_change_event"]

    ctx = cli.make_context("dwm-msg", ["-t", "get_tags"], resilient_parsing=True)
    assert complete_args(ctx, None, "tag") == []
