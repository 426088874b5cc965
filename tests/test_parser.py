import pytest

from salvoserver.parser import (
    Command,
    CommandError,
    CommandType,
    bomb_player,
    handle_command,
    parse_command,
    register_player,
    validate_name,
)
from salvoserver.player import Roster


class FakeConnection:
    def __init__(self):
        self.sent = []
        self.closed = False

    def send(self, data):
        self.sent.append(data)
        return len(data)

    def close(self):
        self.closed = True

    @property
    def text(self):
        return b"".join(self.sent).decode()


def _join(roster, fd):
    conn = FakeConnection()
    return roster.add(fd, conn), conn


@pytest.mark.parametrize("name", ["alice", "a-b-1", "a" * 20, "X"])
def test_validate_name_accepts(name):
    assert validate_name(name) is True


@pytest.mark.parametrize("name", ["", "a" * 21, "bad_name", "caf\u00e9", "a b"])
def test_validate_name_rejects(name):
    assert validate_name(name) is False


def test_parse_reg():
    assert parse_command("REG alice 5 5 -\n") == Command(CommandType.REG, "alice", 5, 5, "-")


def test_parse_bomb():
    cmd = parse_command("BOMB 3 4\n")
    assert (cmd.type, cmd.x, cmd.y) == (CommandType.BOMB, 3, 4)


def test_parse_signed_numbers():
    cmd = parse_command("BOMB -1 +2")
    assert (cmd.x, cmd.y) == (-1, 2)


def test_parse_long_name_is_split_after_twenty_chars():
    cmd = parse_command("REG " + "a" * 20 + "123 4 5 -\n")
    assert cmd == Command(CommandType.REG, "a" * 20, 123, 4, "5")


@pytest.mark.parametrize(
    "line",
    [
        "HELLO\n",
        "REG alice 5 5\n",
        "REG " + "a" * 25 + " 1 2 -\n",
        "REG ab12 3 -\n",
        "BOMB 3\n",
        " BOMB 3 4\n",
        "",
    ],
)
def test_parse_rejects(line):
    with pytest.raises(CommandError):
        parse_command(line)


def test_parse_stops_at_nul():
    with pytest.raises(CommandError):
        parse_command("BOMB 3\x00 4\n")


def test_handle_invalid_command():
    roster = Roster()
    player, conn = _join(roster, 1)
    handle_command(player, "NONSENSE\n", roster)
    assert conn.sent == [b"INVALID\n"]


def test_handle_register_welcomes_and_announces():
    roster = Roster()
    other, other_conn = _join(roster, 1)
    player, conn = _join(roster, 2)
    handle_command(player, "REG alice 5 5 -\n", roster)
    assert conn.text == "WELCOME\nJOIN alice\n"
    assert other_conn.text == "JOIN alice\n"
    assert player.registered and player.name == "alice"


def test_register_twice_is_invalid():
    roster = Roster()
    player, conn = _join(roster, 1)
    register_player(player, parse_command("REG alice 5 5 -"), roster)
    register_player(player, parse_command("REG bob 5 5 -"), roster)
    assert conn.sent[-1] == b"INVALID\n"
    assert player.name == "alice"


def test_register_taken_name():
    roster = Roster()
    first, _ = _join(roster, 1)
    second, conn = _join(roster, 2)
    register_player(first, parse_command("REG alice 5 5 -"), roster)
    conn.sent.clear()
    register_player(second, parse_command("REG alice 2 2 |"), roster)
    assert conn.sent == [b"TAKEN\n"]
    assert not second.registered


def test_register_off_board_ship_is_invalid():
    roster = Roster()
    player, conn = _join(roster, 1)
    register_player(player, parse_command("REG alice 0 0 -"), roster)
    assert conn.sent == [b"INVALID\n"]
    assert not player.registered


def test_register_bad_name_is_invalid():
    roster = Roster()
    player, conn = _join(roster, 1)
    register_player(player, parse_command("REG bad_name 5 5 -"), roster)
    assert conn.sent == [b"INVALID\n"]


def test_bomb_miss_is_broadcast():
    roster = Roster()
    alice, alice_conn = _join(roster, 1)
    bob, bob_conn = _join(roster, 2)
    register_player(alice, parse_command("REG alice 5 5 -"), roster)
    register_player(bob, parse_command("REG bob 2 2 |"), roster)
    alice_conn.sent.clear()
    bob_conn.sent.clear()
    bomb_player(bob, parse_command("BOMB 9 9"), roster)
    assert alice_conn.sent == [b"MISS bob 9 9\n"]
    assert bob_conn.sent == [b"MISS bob 9 9\n"]


def test_bomb_hit_is_broadcast():
    roster = Roster()
    alice, alice_conn = _join(roster, 1)
    bob, _ = _join(roster, 2)
    register_player(alice, parse_command("REG alice 5 5 -"), roster)
    register_player(bob, parse_command("REG bob 2 2 |"), roster)
    alice_conn.sent.clear()
    handle_command(bob, "BOMB 5 5\n", roster)
    assert alice_conn.sent == [b"HIT bob 5 5 alice\n"]
    assert len(roster) == 2


def test_sinking_removes_player():
    roster = Roster()
    alice, alice_conn = _join(roster, 1)
    bob, bob_conn = _join(roster, 2)
    register_player(alice, parse_command("REG alice 5 5 -"), roster)
    register_player(bob, parse_command("REG bob 2 2 |"), roster)
    for x in range(3, 8):
        bomb_player(bob, parse_command(f"BOMB {x} 5"), roster)
    assert bob_conn.text.endswith("HIT bob 7 5 alice\nGG alice\n")
    assert alice_conn.closed
    assert roster.find(1) is None
    assert len(roster) == 1


def test_miss_message_is_clipped():
    roster = Roster()
    player, conn = _join(roster, 1)
    register_player(player, parse_command("REG " + "n" * 20 + " 5 5 -"), roster)
    conn.sent.clear()
    bomb_player(player, parse_command("BOMB 1000000 1000000"), roster)
    msg = conn.sent[0].decode()
    assert len(msg) == 39
    assert msg.startswith("MISS " + "n" * 20 + " 1000000 ")