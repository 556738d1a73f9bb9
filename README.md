# remmux

A small remote terminal multiplexer. A server accepts TCP sessions and runs a
simple line-oriented shell for each one; a curses client shows every session
as a tile on the screen and forwards your keystrokes to the one that has focus.

The package needs only the Python standard library and a POSIX system with
curses.

## Installing

```
pip install .
```

## Running

Start the server. By default it listens on TCP port 8912 on all interfaces:

```
remmux-server
remmux-server --host 127.0.0.1 --port 9000
```

In another terminal, start the client. By default it connects to
`127.0.0.1`, port 8912, and opens its first session straight away:

```
remmux-client
remmux-client --address 127.0.0.1 --port 9000
```

Type a command and press Enter; the whole line is sent to the server, which
runs it, and the output appears in the focused tile over the next polls.
Printable characters, Enter and Backspace go to the focused tile; other keys
are ignored. Backspace removes the last character typed on the current line.
Press `Ctrl-C` to leave the client.

The shell splits the line on spaces (at most 127 words) and runs the program
directly, with standard output and standard error collected together and
standard input empty. There are no quotes, pipes or redirections.

A session that sends no stream request for 15 seconds is closed by the server;
the client polls every session on each step, which keeps them alive while it
runs.

### Client commands

Press `Ctrl-A` to enter a command on the bottom line of the screen, then
press Enter:

| Command    | Effect                                           |
|------------|--------------------------------------------------|
| `create`   | open a new session; the tiles are laid out again |
| `select N` | move focus to session number `N` (from 0)        |

Any other command is ignored. Tiles are arranged in a grid that grows one
column, then one row, at a time, so the layout stays close to square as
sessions are added (`remmux.layout.grid_shape` and `remmux.layout.tile`). The
bottom line of the terminal is kept free for commands.

### Trying the shell locally

To try the shell without a server or network, run it straight in a curses
console:

```
remmux-shell
```

Keys go directly to the shell and its output is printed as it arrives.

## What it does not do

- Sessions cannot be closed from the client; a session ends when the client
  disconnects or goes quiet for 15 seconds.
- The shell is not interactive: programs that read from standard input see
  end of file, and output appears only after a program has finished.
- There is no authentication or encryption on the connection.

## Protocol

Each exchange starts with a one-byte command code (`remmux.protocol.Command`):

| Code | Command            |
|------|--------------------|
| 1    | initiate shutdown  |
| 2    | heartbeat          |
| 3    | create session     |
| 4    | stream             |

A connection opens a session by sending the create-session code. A stream
exchange then sends the stream code, waits for it to be echoed, and sends a
frame of input; the server answers with a frame holding whatever output the
shell has produced. A frame is a little-endian signed 32-bit length followed
by that many bytes, at most 10240. A heartbeat is answered with the heartbeat
code. Sending the shutdown code as the first byte of a new connection stops
the server and all of its sessions; any other unknown first byte just closes
that connection.

## Tests

```
pip install .[test]
pytest
```