# salvoserver

A small TCP server for a multiplayer battleship-style game. Each connected
client registers a single five-tile ship on a 10×10 board, and then any
connected client can drop bombs on a coordinate. A bomb hits every registered
ship that covers that square. A player whose ship is fully sunk, or who
disconnects, is announced with `GG` and removed from the game.

## Installation

```
pip install .
```

## Running the server

```
salvoserver 4000
```

The only argument is the port to listen on, on all interfaces. It must be in
the range 1025–65535; anything else, a missing argument, or a port that cannot
be bound makes the command print an error and exit with status 1. Progress is
logged to standard error with a `[log]` prefix. Stop the server with Ctrl-C.

## Protocol

Every message is one line of text ending in `\n`. The server buffers at most
100 bytes per client; a client whose data does not fit, or who fills the
buffer without a newline, is disconnected. Each read from a client runs at
most one complete line; any further buffered lines wait for the next read.

Client to server:

| Command | Meaning |
|---|---|
| `REG <name> <x> <y> <dir>` | Register under `name` (1–20 ASCII letters, digits or `-`) and place a ship centred on `(x, y)`. `dir` is `-` to lay the ship along x or `\|` to lay it along y. |
| `BOMB <x> <y>` | Drop a bomb on `(x, y)`. |

Server to client:

| Message | Meaning |
|---|---|
| `WELCOME` | Registration accepted. |
| `TAKEN` | Name already in use. |
| `INVALID` | Unrecognised command, bad name, ship off the board, or already registered. |
| `JOIN <name>` | Broadcast to everyone when a player registers. |
| `HIT <attacker> <x> <y> <victim>` | Broadcast for each ship hit by a bomb. |
| `MISS <attacker> <x> <y>` | Broadcast when a bomb hits nothing. |
| `GG <name>` | Broadcast when a registered player is sunk or leaves. |

Coordinates run from 0 to 9 on both axes. A ship occupies its centre and two
tiles on each side, so every one of its tiles must be on the board.

## Example session

```
> REG alice 4 4 -
< WELCOME
< JOIN alice
> BOMB 2 4
< HIT alice 2 4 alice
> BOMB 9 9
< MISS alice 9 9
```

## Using it as a library

The server can be driven directly from Python. `GameServer` is a context
manager, and `poll_once(timeout)` handles a single round of events:

```python
from salvoserver.server import GameServer, create_listener

with GameServer(create_listener(4000)) as server:
    server.serve_forever()
```

The pieces also work on their own:

- `salvoserver.buffer.LineBuffer` – a fixed-capacity byte buffer with
  `append`, `pop_line`, `newline_index` and `is_full`.
- `salvoserver.game.Ship.place(x, y, direction)` – builds a ship, raising
  `PlacementError` if it would leave the board; `attack` and `is_sunk` follow
  the game rules.
- `salvoserver.parser.parse_command(line)` – returns a `Command`, or raises
  `CommandError` for anything that is not a `REG` or `BOMB` line.
- `salvoserver.player.Roster` – the connected players, with `broadcast`,
  `find`, `find_by_name`, `remove` and `cleanup`.

## What it does not do

There is no client program; any line-based TCP tool can be used to connect.
The server keeps no turn order, scores or history, and nothing is stored
between runs.

## Tests

```
pip install ".[test]"
pytest
```