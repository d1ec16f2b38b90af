import pytest

from superwav.messages import (
    SAMPLE_MESSAGES,
    Message,
    main,
    process_message,
    split_tokens,
    variable_and_value,
)


def test_split_tokens_drops_empty():
    assert split_tokens("a,,b,", ",") == ["a", "b"]


def test_split_tokens_multiple_delimiters():
    assert split_tokens("a:b;c", ":;") == ["a", "b", "c"]


def test_split_tokens_only_delimiters():
    assert split_tokens(",,,", ",") == []


def test_variable_and_value_keeps_raw_value():
    assert variable_and_value("SongPosY: 0") == ("SongPosY", " 0")


def test_variable_and_value_without_value():
    with pytest.raises(ValueError):
        variable_and_value("Action")


def test_identification_message():
    assert process_message("Action:identification,ID:1") == Message(
        action="identification", identification=1
    )


def test_start_message():
    msg = process_message(SAMPLE_MESSAGES[1])
    assert msg.action == "start"
    assert msg.start_time == 1435142177654
    assert (msg.client_pos_x, msg.client_pos_y) == (6, 5)
    assert msg.song == -1
    assert (msg.song_pos_x, msg.song_pos_y) == (11, 0)


def test_song_message():
    msg = process_message("Action:song,StartTime:0,Song:1,SongPosX:5,SongPosY:0")
    assert msg == Message(action="song", song=1, song_pos_x=5)


def test_exit_message_has_defaults():
    assert process_message("Action:exit") == Message(action="exit")


def test_unknown_names_ignored():
    assert process_message("Action:client,Bogus:3,ClientPosX:7") == Message(
        action="client", client_pos_x=7
    )


def test_non_numeric_value_parses_leading_digits():
    msg = process_message("ID:12abc,Song:xyz")
    assert msg.identification == 12
    assert msg.song == Message().song


def test_later_field_overrides_earlier():
    assert process_message("ID:1,ID:2").identification == 2


def test_field_without_value_raises():
    with pytest.raises(ValueError):
        process_message("Action:start,ID")


def test_main_prints_fields(capsys):
    assert main(["Action:client,ClientPosX:7"]) == 0
    out = capsys.readouterr().out
    assert "== Action:client,ClientPosX:7 ==" in out
    assert "Action, client" in out
    assert "ClientPosX, 7" in out


def test_main_reports_bad_message(capsys):
    assert main(["Action"]) == 1
    assert "error" in capsys.readouterr().err