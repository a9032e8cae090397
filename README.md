# gatebrawl

A small side-scrolling brawler drawn with pygame. You fight across three
stacked platforms, hop between floors through gates, and clear every enemy
to move on to the next level. Lose all your health and the run is over.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Playing

```
gatebrawl [--db PATH] [--resources DIR]
```

- `--db` is the SQLite file with the level data and saved games
  (default `database.sqlite` in the current directory).
- `--resources` is the directory that holds the `res/` images
  (default the current directory).

The game opens on a title screen; click the start button to begin at
level 1. A second after start-up a message box lists the controls; press
any key to dismiss it. Clearing level 1 shows a transition picture for two
seconds and then starts level 2. Clearing level 2 shows the victory screen,
and dying shows the defeat screen; both have a button back to the title.

Controls:

| Key   | Action                                         |
|-------|------------------------------------------------|
| A     | move left                                      |
| D     | move right                                     |
| Space | jump                                           |
| J     | attack                                         |
| K     | dash (has a cooldown; dashing avoids damage)   |
| L     | heal up to 10 health (has a cooldown)          |

Walking into a gate sends you to another floor. The panel in the top-left
corner shows your health and the remaining dash and heal cooldowns.
Questions are answered with Y or Enter for yes, N or Escape for no.

## Saving

Character stats and positions live in the SQLite file. On start-up the
`origin` and `user` tables are created if missing. A level's starting
fighters are read from `origin` (one `Player` row and any number of
`Enemy1` and `Boss` rows, selected by `levelid`). When you close the window
during a level you are asked whether to save; the level's fighters are then
written to `user`. The next time that level starts you are asked whether to
load the save; either way the level's save is removed once the level is
built.

## What is not included

The package ships no level data and no images. The `origin` table must be
filled with a `Player` row for each level before that level can start;
otherwise the game stops with an error. Images are looked up under
`res/` in the resources directory; a missing image is drawn as a dark grey
box and a missing background as a plain fill.

## Using it as a library

The pieces run without a window:

- `gatebrawl.app.Game` owns the canvas and the current screen;
  `Game.tick(now_ms)` runs due timers and advances a running level by one
  frame, and `Game.close()` offers to save and shuts down.
  `gatebrawl.app.main(argv)` is the command above.
- `gatebrawl.screens` holds `BeginScreen`, `PlayScreen`, `EndScreen` and
  `FailScreen`.
- `gatebrawl.level.Level` runs one level; `Level.tick()` advances it one
  frame and `Level.save()` writes its fighters to the `user` table.
- `gatebrawl.actors` holds `Player`, `Enemy`, `Enemy1` and `Boss`;
  `gatebrawl.character.Character` is their common base with the move,
  jump, drop, dash and attack states, and `Stats` holds their numbers.
- `gatebrawl.hud.PlayerInfo` is the status panel, and `gatebrawl.effects`
  the attack slashes and floating damage and healing numbers.
- `gatebrawl.canvas.Canvas` is the scene the game draws into, with
  bounding-box collision via `Canvas.is_crash`.
- `gatebrawl.events` provides `Signal`, `KeyDispatcher` and `Scheduler`.
- `gatebrawl.storage.Database` wraps the SQLite file and raises
  `StorageError` when a statement fails.